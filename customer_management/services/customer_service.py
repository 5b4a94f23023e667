"""Customer request handlers.

Every function runs inside the caller's session as one unit of work:
existence checks, writes and the final commit either all land or, on any
raised error, the uncommitted session is discarded by ``get_db``.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from customer_management.core.credentials import CredentialGenerator, credential_generator
from customer_management.core.errors import (
    CustomerAlreadyExistsError,
    CustomerNotFoundError,
    InvalidOtpError,
    PasswordMismatchError,
)
from customer_management.core.security import hash_password
from customer_management.models.customer import Customer, CustomerStatus
from customer_management.repositories import addresses as addresses_repo
from customer_management.repositories import customers as customers_repo
from customer_management.repositories import otps as otps_repo
from customer_management.schemas.customer import (
    CustomerCreate,
    CustomerCreatedOut,
    CustomerOut,
    CustomerPage,
    CustomerSortField,
    CustomerUpdate,
)
from customer_management.services.mapper import (
    copy_customer_fields,
    to_address_model,
    to_customer_created,
    to_customer_model,
    to_customer_out,
    to_otp_model,
)

logger = logging.getLogger(__name__)


def _require_by_id(db: Session, customer_id: int) -> Customer:
    customer = customers_repo.find_by_id(db, customer_id)
    if customer is None:
        raise CustomerNotFoundError(f"Customer not found with customerId: {customer_id}")
    return customer


def _require_by_mobile_number(db: Session, mobile_number: str) -> Customer:
    customer = customers_repo.find_by_mobile_number(db, mobile_number)
    if customer is None:
        raise CustomerNotFoundError(f"Customer not found with Mobile Number: {mobile_number}")
    return customer


def _require_by_email_address(db: Session, email_address: str) -> Customer:
    customer = customers_repo.find_by_email_address(db, email_address)
    if customer is None:
        raise CustomerNotFoundError(f"Customer not found with Email Address: {email_address}")
    return customer


def _ensure_unique(db: Session, *, mobile_number: str, email_address: str, full_name: str, exclude_id: int | None = None) -> None:
    if customers_repo.exists_by_mobile_number(db, mobile_number, exclude_id=exclude_id):
        raise CustomerAlreadyExistsError("Mobile number already exists")
    if customers_repo.exists_by_email_address(db, email_address, exclude_id=exclude_id):
        raise CustomerAlreadyExistsError("Email already exists")
    if customers_repo.exists_by_full_name(db, full_name, exclude_id=exclude_id):
        raise CustomerAlreadyExistsError("Full name already exists")


def create_customer(db: Session, payload: CustomerCreate, *, generator: CredentialGenerator | None = None) -> CustomerCreatedOut:
    """Create an INACTIVE customer with its addresses and a fresh activation OTP.

    The OTP value is returned here and nowhere else.
    """
    generator = generator or credential_generator
    logger.info("Create request received for mobile %s", payload.mobile_number)

    _ensure_unique(
        db,
        mobile_number=payload.mobile_number,
        email_address=str(payload.email_address),
        full_name=payload.full_name,
    )

    raw_password = payload.password or generator.generate_password()
    customer = customers_repo.save(db, to_customer_model(payload, hash_password(raw_password)))

    for address_in in payload.addresses:
        addresses_repo.save(db, to_address_model(address_in, customer))

    otp = otps_repo.save(db, to_otp_model(customer, generator.generate_otp()))

    db.commit()
    db.refresh(customer)

    logger.info("Customer created (id=%s mobile=%s)", customer.id, customer.mobile_number)
    return to_customer_created(customer, otp)


def list_customers(db: Session, *, page: int, size: int, sort_by: CustomerSortField | str) -> CustomerPage:
    sort_field = CustomerSortField(sort_by)
    logger.info("Fetching customers page=%s size=%s sortBy=%s", page, size, sort_field.value)

    items, total = customers_repo.find_all(db, page=page, size=size, sort_by=sort_field.value)
    total_pages = (total + size - 1) // size
    return CustomerPage(
        items=[to_customer_out(c) for c in items],
        page=page,
        size=size,
        sort_by=sort_field.value,
        total=total,
        total_pages=total_pages,
    )


def get_customer_by_id(db: Session, customer_id: int) -> CustomerOut:
    return to_customer_out(_require_by_id(db, customer_id))


def get_customer_by_mobile_number(db: Session, mobile_number: str) -> CustomerOut:
    return to_customer_out(_require_by_mobile_number(db, mobile_number))


def get_customer_by_email_address(db: Session, email_address: str) -> CustomerOut:
    return to_customer_out(_require_by_email_address(db, email_address))


def get_customer_by_full_name(db: Session, full_name: str) -> CustomerOut:
    customer = customers_repo.find_by_full_name(db, full_name)
    if customer is None:
        raise CustomerNotFoundError(f"Customer not found with fullName: {full_name}")
    return to_customer_out(customer)


def update_mobile_number(db: Session, mobile_number: str, new_mobile_number: str) -> CustomerOut:
    customer = _require_by_mobile_number(db, mobile_number)
    if customers_repo.exists_by_mobile_number(db, new_mobile_number, exclude_id=customer.id):
        raise CustomerAlreadyExistsError("Mobile number already exists")

    customers_repo.update_mobile_by_id(db, customer.id, new_mobile_number)
    db.commit()
    db.refresh(customer)

    logger.info("Updated mobile number for customer id=%s", customer.id)
    return to_customer_out(customer)


def update_email_address(db: Session, mobile_number: str, new_email_address: str) -> CustomerOut:
    customer = _require_by_mobile_number(db, mobile_number)
    if customers_repo.exists_by_email_address(db, new_email_address, exclude_id=customer.id):
        raise CustomerAlreadyExistsError("Email already exists")

    customers_repo.update_email_by_id(db, customer.id, new_email_address)
    db.commit()
    db.refresh(customer)

    logger.info("Updated email for customer id=%s", customer.id)
    return to_customer_out(customer)


def update_password(db: Session, mobile_number: str, new_password: str) -> CustomerOut:
    customer = _require_by_mobile_number(db, mobile_number)

    customers_repo.update_password_by_id(db, customer.id, hash_password(new_password))
    db.commit()
    db.refresh(customer)

    logger.info("Changed password for customer id=%s", customer.id)
    return to_customer_out(customer)


def forget_password(db: Session, mobile_number: str, new_password: str, confirm_password: str) -> CustomerOut:
    if new_password != confirm_password:
        raise PasswordMismatchError("New password and confirm password do not match")
    return update_password(db, mobile_number, new_password)


def update_customer(db: Session, customer_id: int, payload: CustomerUpdate) -> CustomerOut:
    """Replace every scalar field and the address list of an existing customer."""
    customer = _require_by_id(db, customer_id)
    _ensure_unique(
        db,
        mobile_number=payload.mobile_number,
        email_address=str(payload.email_address),
        full_name=payload.full_name,
        exclude_id=customer.id,
    )

    copy_customer_fields(payload, customer)
    if payload.password:
        customer.password = hash_password(payload.password)
    customers_repo.save(db, customer)

    addresses_repo.delete_all_by_customer_id(db, customer.id)
    db.expire(customer, ["addresses"])
    for address_in in payload.addresses:
        addresses_repo.save(db, to_address_model(address_in, customer))

    db.commit()
    db.refresh(customer)

    logger.info("Updated customer id=%s", customer.id)
    return to_customer_out(customer)


def activate_customer_by_otp(db: Session, mobile_number: str, otp: str) -> CustomerOut:
    customer = _require_by_mobile_number(db, mobile_number)

    if otp not in otps_repo.find_values_by_customer_id(db, customer.id):
        logger.warning("Rejected activation attempt for customer id=%s", customer.id)
        raise InvalidOtpError("Invalid OTP")

    customers_repo.update_status_by_id(db, customer.id, CustomerStatus.ACTIVE)
    db.commit()
    db.refresh(customer)

    logger.info("Activated customer id=%s", customer.id)
    return to_customer_out(customer)


def _soft_delete(db: Session, customer: Customer) -> CustomerOut:
    customers_repo.update_status_by_id(db, customer.id, CustomerStatus.INACTIVE)
    db.commit()
    db.refresh(customer)

    logger.info("Deactivated customer id=%s", customer.id)
    return to_customer_out(customer)


def delete_customer(db: Session, customer_id: int) -> CustomerOut:
    return _soft_delete(db, _require_by_id(db, customer_id))


def delete_customer_by_mobile_number(db: Session, mobile_number: str) -> CustomerOut:
    return _soft_delete(db, _require_by_mobile_number(db, mobile_number))


def delete_customer_by_email_address(db: Session, email_address: str) -> CustomerOut:
    return _soft_delete(db, _require_by_email_address(db, email_address))


def purge_customer(db: Session, customer_id: int) -> CustomerOut:
    """Hard delete: remove the customer row together with its addresses and OTPs."""
    customer = _require_by_id(db, customer_id)
    out = to_customer_out(customer)

    customers_repo.delete_by_id(db, customer.id)
    db.commit()

    logger.info("Purged customer id=%s", customer_id)
    return out
