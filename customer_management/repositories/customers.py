"""Customer persistence gateway.

Point lookups and existence checks run against the unique indexes on
``mobile_number``, ``email_address`` and ``full_name``. Writes flush
immediately so that a unique-index violation surfaces as
``CustomerAlreadyExistsError`` inside the caller's transaction.
"""
from __future__ import annotations

from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from customer_management.core.errors import CustomerAlreadyExistsError
from customer_management.models.customer import Customer, CustomerStatus


def _flush_or_conflict(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise CustomerAlreadyExistsError("Customer already exists") from e


def save(db: Session, customer: Customer) -> Customer:
    db.add(customer)
    _flush_or_conflict(db)
    return customer


def find_by_id(db: Session, customer_id: int) -> Customer | None:
    return db.get(Customer, customer_id)


def find_all(db: Session, *, page: int, size: int, sort_by: str) -> tuple[list[Customer], int]:
    sort_column = getattr(Customer, sort_by)
    q = (
        select(Customer)
        .order_by(sort_column.desc(), Customer.id.desc())
        .offset(page * size)
        .limit(size)
    )
    items = list(db.execute(q).scalars().all())
    total = db.execute(select(func.count()).select_from(Customer)).scalar_one()
    return items, total


def delete(db: Session, customer: Customer) -> None:
    db.delete(customer)
    db.flush()


def delete_by_id(db: Session, customer_id: int) -> Customer | None:
    customer = find_by_id(db, customer_id)
    if customer is None:
        return None
    delete(db, customer)
    return customer


def _exists(db: Session, column, value: str, exclude_id: int | None) -> bool:
    cond = column == value
    if exclude_id is not None:
        cond = cond & (Customer.id != exclude_id)
    return bool(db.execute(select(exists().where(cond))).scalar())


def exists_by_mobile_number(db: Session, mobile_number: str, *, exclude_id: int | None = None) -> bool:
    return _exists(db, Customer.mobile_number, mobile_number, exclude_id)


def exists_by_email_address(db: Session, email_address: str, *, exclude_id: int | None = None) -> bool:
    return _exists(db, Customer.email_address, email_address, exclude_id)


def exists_by_full_name(db: Session, full_name: str, *, exclude_id: int | None = None) -> bool:
    return _exists(db, Customer.full_name, full_name, exclude_id)


def find_by_mobile_number(db: Session, mobile_number: str) -> Customer | None:
    return db.execute(select(Customer).where(Customer.mobile_number == mobile_number)).scalar_one_or_none()


def find_by_email_address(db: Session, email_address: str) -> Customer | None:
    return db.execute(select(Customer).where(Customer.email_address == email_address)).scalar_one_or_none()


def find_by_full_name(db: Session, full_name: str) -> Customer | None:
    return db.execute(select(Customer).where(Customer.full_name == full_name)).scalar_one_or_none()


def _update_field(db: Session, customer_id: int, **values) -> bool:
    try:
        result = db.execute(update(Customer).where(Customer.id == customer_id).values(**values))
    except IntegrityError as e:
        db.rollback()
        raise CustomerAlreadyExistsError("Customer already exists") from e
    return result.rowcount == 1


def update_mobile_by_id(db: Session, customer_id: int, mobile_number: str) -> bool:
    return _update_field(db, customer_id, mobile_number=mobile_number)


def update_email_by_id(db: Session, customer_id: int, email_address: str) -> bool:
    return _update_field(db, customer_id, email_address=email_address)


def update_password_by_id(db: Session, customer_id: int, password_hash: str) -> bool:
    return _update_field(db, customer_id, password=password_hash)


def update_status_by_id(db: Session, customer_id: int, status: CustomerStatus) -> bool:
    return _update_field(db, customer_id, status=status)
