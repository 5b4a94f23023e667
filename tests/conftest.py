import os
import tempfile

# Settings are cached on first import, so the environment must be in place first
_DB_DIR = tempfile.mkdtemp(prefix="customer-management-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

import customer_management.models  # noqa: F401
from customer_management.db.base import Base
from customer_management.db.session import SessionLocal, engine
from customer_management.main import app


@pytest.fixture(autouse=True)
def _fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def customer_payload():
    def _make(**overrides):
        data = {
            "first_name": "Asha",
            "last_name": "Bose",
            "full_name": "Asha Bose",
            "age": 30,
            "mobile_number": "9999999999",
            "email_address": "asha.bose@mail.com",
            "password": "secret1",
            "addresses": [
                {
                    "street": "12 MG Road",
                    "city": "Pune",
                    "state": "Maharashtra",
                    "country": "India",
                    "address_type": "HOME",
                    "pincode": 411001,
                }
            ],
        }
        data.update(overrides)
        return data

    return _make
