from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from customer_management.db.base import Base

if TYPE_CHECKING:
    from customer_management.models.customer import Customer


class Address(Base):
    __tablename__ = "customer_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False)
    state: Mapped[str] = mapped_column(String(128), nullable=False)
    country: Mapped[str] = mapped_column(String(128), nullable=False)
    address_type: Mapped[str | None] = mapped_column(String(32), nullable=True)  # HOME/OFFICE/...
    pincode: Mapped[int] = mapped_column(Integer, nullable=False)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="addresses")
