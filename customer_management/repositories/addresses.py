from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from customer_management.models.address import Address


def save(db: Session, address: Address) -> Address:
    db.add(address)
    db.flush()
    return address


def find_by_id(db: Session, address_id: int) -> Address | None:
    return db.get(Address, address_id)


def find_all_by_customer_id(db: Session, customer_id: int) -> list[Address]:
    q = select(Address).where(Address.customer_id == customer_id).order_by(Address.id)
    return list(db.execute(q).scalars().all())


def delete_all_by_customer_id(db: Session, customer_id: int) -> None:
    # Through the ORM so the owning customer's collection stays in sync
    for address in find_all_by_customer_id(db, customer_id):
        db.delete(address)
    db.flush()
