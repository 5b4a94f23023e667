from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from customer_management.models.otp import OneTimePassword


def save(db: Session, otp: OneTimePassword) -> OneTimePassword:
    db.add(otp)
    db.flush()
    return otp


def find_by_id(db: Session, otp_id: int) -> OneTimePassword | None:
    return db.get(OneTimePassword, otp_id)


def find_all_by_customer_id(db: Session, customer_id: int) -> list[OneTimePassword]:
    q = select(OneTimePassword).where(OneTimePassword.customer_id == customer_id).order_by(OneTimePassword.id)
    return list(db.execute(q).scalars().all())


def find_values_by_customer_id(db: Session, customer_id: int) -> list[str]:
    q = select(OneTimePassword.otp_value).where(OneTimePassword.customer_id == customer_id)
    return list(db.execute(q).scalars().all())
