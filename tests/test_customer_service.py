"""Tests for the customer request handlers (no HTTP)."""
import random

import pytest
from sqlalchemy import func, select

from customer_management.core.credentials import CredentialGenerator
from customer_management.core.errors import (
    CustomerAlreadyExistsError,
    CustomerNotFoundError,
    InvalidCredentialError,
    InvalidOtpError,
    PasswordMismatchError,
)
from customer_management.core.security import verify_password
from customer_management.models import Address, Customer, CustomerStatus, OneTimePassword
from customer_management.schemas.customer import CustomerCreate, CustomerUpdate
from customer_management.services import customer_service


def _counts(db):
    return tuple(db.execute(select(func.count()).select_from(m)).scalar_one() for m in (Customer, Address, OneTimePassword))


def _create(db, customer_payload, **overrides):
    return customer_service.create_customer(db, CustomerCreate(**customer_payload(**overrides)))


def _other_code(code: str) -> str:
    return "000000" if code != "000000" else "111111"


class TestCreateCustomer:
    def test_starts_inactive_with_one_otp(self, db, customer_payload):
        created = _create(db, customer_payload)

        assert created.status == CustomerStatus.INACTIVE
        assert len(created.otp) == 6 and created.otp.isdigit()
        assert len(created.addresses) == 1
        assert created.addresses[0].pincode == 411001
        assert _counts(db) == (1, 1, 1)

        stored = db.get(Customer, created.id)
        assert [o.otp_value for o in stored.otps] == [created.otp]
        assert verify_password("secret1", stored.password)

    def test_otp_comes_from_injected_generator(self, db, customer_payload):
        created = customer_service.create_customer(
            db, CustomerCreate(**customer_payload()), generator=CredentialGenerator(random.Random(7))
        )
        assert created.otp == CredentialGenerator(random.Random(7)).generate_otp()

    def test_missing_password_is_generated(self, db, customer_payload):
        payload = customer_payload()
        payload.pop("password")
        created = customer_service.create_customer(db, CustomerCreate(**payload), generator=CredentialGenerator(random.Random(3)))

        expected = CredentialGenerator(random.Random(3)).generate_password()
        assert verify_password(expected, db.get(Customer, created.id).password)

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"email_address": "x@mail.com", "full_name": "X Y"}, "Mobile number already exists"),
            ({"mobile_number": "8888888888", "full_name": "X Y"}, "Email already exists"),
            ({"mobile_number": "8888888888", "email_address": "x@mail.com"}, "Full name already exists"),
        ],
    )
    def test_duplicates_rejected_without_partial_rows(self, db, customer_payload, overrides, message):
        _create(db, customer_payload)
        before = _counts(db)

        with pytest.raises(CustomerAlreadyExistsError) as exc:
            _create(db, customer_payload, **overrides)

        assert exc.value.message == message
        db.rollback()
        assert _counts(db) == before


class TestLookups:
    def test_get_by_each_key(self, db, customer_payload):
        created = _create(db, customer_payload)

        assert customer_service.get_customer_by_id(db, created.id).id == created.id
        assert customer_service.get_customer_by_mobile_number(db, "9999999999").id == created.id
        assert customer_service.get_customer_by_email_address(db, "asha.bose@mail.com").id == created.id
        assert customer_service.get_customer_by_full_name(db, "Asha Bose").id == created.id

    def test_misses_raise_not_found(self, db):
        with pytest.raises(CustomerNotFoundError):
            customer_service.get_customer_by_id(db, 1)
        with pytest.raises(CustomerNotFoundError):
            customer_service.get_customer_by_mobile_number(db, "1")
        with pytest.raises(CustomerNotFoundError):
            customer_service.get_customer_by_email_address(db, "none@mail.com")
        with pytest.raises(CustomerNotFoundError, match="fullName"):
            customer_service.get_customer_by_full_name(db, "Nobody")

    def test_read_responses_never_carry_otp_or_password(self, db, customer_payload):
        created = _create(db, customer_payload)
        out = customer_service.get_customer_by_id(db, created.id).model_dump()
        assert "otp" not in out
        assert "password" not in out

    def test_list_is_paged_and_sorted_descending(self, db, customer_payload):
        for i, age in enumerate((25, 60, 41)):
            _create(
                db,
                customer_payload,
                mobile_number=f"70000000{i}",
                email_address=f"c{i}@mail.com",
                full_name=f"C {i}",
                age=age,
            )

        page = customer_service.list_customers(db, page=0, size=2, sort_by="age")
        assert [c.age for c in page.items] == [60, 41]
        assert (page.total, page.total_pages, page.sort_by) == (3, 2, "age")

        page = customer_service.list_customers(db, page=1, size=2, sort_by="age")
        assert [c.age for c in page.items] == [25]


class TestActivation:
    def test_matching_otp_activates(self, db, customer_payload):
        created = _create(db, customer_payload)
        out = customer_service.activate_customer_by_otp(db, "9999999999", created.otp)
        assert out.status == CustomerStatus.ACTIVE

    def test_wrong_otp_leaves_status(self, db, customer_payload):
        created = _create(db, customer_payload)

        with pytest.raises(InvalidOtpError):
            customer_service.activate_customer_by_otp(db, "9999999999", _other_code(created.otp))

        assert customer_service.get_customer_by_id(db, created.id).status == CustomerStatus.INACTIVE

    def test_otp_must_match_exactly(self, db, customer_payload):
        created = _create(db, customer_payload)
        with pytest.raises(InvalidCredentialError):
            customer_service.activate_customer_by_otp(db, "9999999999", f" {created.otp}")

    def test_unknown_mobile(self, db):
        with pytest.raises(CustomerNotFoundError):
            customer_service.activate_customer_by_otp(db, "123", "123456")

    def test_otp_stays_valid_after_soft_delete(self, db, customer_payload):
        created = _create(db, customer_payload)
        customer_service.activate_customer_by_otp(db, "9999999999", created.otp)
        customer_service.delete_customer(db, created.id)

        out = customer_service.activate_customer_by_otp(db, "9999999999", created.otp)
        assert out.status == CustomerStatus.ACTIVE


class TestUpdates:
    def test_update_mobile_and_email(self, db, customer_payload):
        created = _create(db, customer_payload)

        out = customer_service.update_mobile_number(db, "9999999999", "9888888888")
        assert out.mobile_number == "9888888888"

        out = customer_service.update_email_address(db, "9888888888", "asha@newmail.com")
        assert out.email_address == "asha@newmail.com"
        assert out.id == created.id

    def test_update_mobile_to_taken_number(self, db, customer_payload):
        _create(db, customer_payload)
        _create(db, customer_payload, mobile_number="8888888888", email_address="b@mail.com", full_name="B B")

        with pytest.raises(CustomerAlreadyExistsError, match="Mobile number already exists"):
            customer_service.update_mobile_number(db, "8888888888", "9999999999")
        with pytest.raises(CustomerAlreadyExistsError, match="Email already exists"):
            customer_service.update_email_address(db, "8888888888", "asha.bose@mail.com")

    def test_update_password(self, db, customer_payload):
        created = _create(db, customer_payload)
        customer_service.update_password(db, "9999999999", "brand-new")

        stored = db.get(Customer, created.id)
        db.refresh(stored)
        assert verify_password("brand-new", stored.password)

    def test_forget_password_mismatch(self, db, customer_payload):
        created = _create(db, customer_payload)

        with pytest.raises(PasswordMismatchError):
            customer_service.forget_password(db, "9999999999", "brand-new", "brand-neW")

        assert verify_password("secret1", db.get(Customer, created.id).password)

    def test_forget_password_same_as_update(self, db, customer_payload):
        created = _create(db, customer_payload)
        out = customer_service.forget_password(db, "9999999999", "brand-new", "brand-new")

        stored = db.get(Customer, created.id)
        db.refresh(stored)
        assert verify_password("brand-new", stored.password)
        assert out.status == CustomerStatus.INACTIVE

    def test_full_update_replaces_fields_and_addresses(self, db, customer_payload):
        created = _create(db, customer_payload)
        old_digest = db.get(Customer, created.id).password

        payload = customer_payload(
            first_name="Ash",
            full_name="Ash Bose",
            age=31,
            addresses=[
                {"street": "1 Park St", "city": "Kolkata", "state": "WB", "country": "India", "pincode": 700016},
                {"street": "2 Hill Rd", "city": "Mumbai", "state": "MH", "country": "India", "address_type": "OFFICE", "pincode": 400050},
            ],
        )
        payload.pop("password")
        out = customer_service.update_customer(db, created.id, CustomerUpdate(**payload))

        assert (out.first_name, out.full_name, out.age) == ("Ash", "Ash Bose", 31)
        assert [a.city for a in out.addresses] == ["Kolkata", "Mumbai"]
        assert out.addresses[0].address_type is None
        assert _counts(db) == (1, 2, 1)
        assert db.get(Customer, created.id).password == old_digest

    def test_full_update_rejects_other_customers_keys(self, db, customer_payload):
        _create(db, customer_payload)
        other = _create(db, customer_payload, mobile_number="8888888888", email_address="b@mail.com", full_name="B B")

        payload = customer_payload(mobile_number="8888888888", email_address="b@mail.com")
        with pytest.raises(CustomerAlreadyExistsError, match="Full name already exists"):
            customer_service.update_customer(db, other.id, CustomerUpdate(**payload))

    def test_full_update_missing_customer(self, db, customer_payload):
        with pytest.raises(CustomerNotFoundError):
            customer_service.update_customer(db, 42, CustomerUpdate(**customer_payload()))


class TestDeletes:
    def test_soft_delete_by_each_key(self, db, customer_payload):
        created = _create(db, customer_payload)

        for delete in (
            lambda: customer_service.delete_customer(db, created.id),
            lambda: customer_service.delete_customer_by_mobile_number(db, "9999999999"),
            lambda: customer_service.delete_customer_by_email_address(db, "asha.bose@mail.com"),
        ):
            customer_service.activate_customer_by_otp(db, "9999999999", created.otp)
            out = delete()
            assert out.status == CustomerStatus.INACTIVE

        assert _counts(db) == (1, 1, 1)

    def test_purge_removes_everything(self, db, customer_payload):
        created = _create(db, customer_payload)

        out = customer_service.purge_customer(db, created.id)

        assert out.id == created.id
        assert _counts(db) == (0, 0, 0)
        with pytest.raises(CustomerNotFoundError):
            customer_service.purge_customer(db, created.id)
