from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

from customer_management.core.config import get_settings


@lru_cache
def get_pwd_context() -> CryptContext:
    settings = get_settings()
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)


def hash_password(password: str) -> str:
    return get_pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return get_pwd_context().verify(plain_password, hashed_password)
