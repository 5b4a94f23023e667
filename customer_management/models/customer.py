from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from customer_management.db.base import Base
from customer_management.models._mixins import TimestampMixin

if TYPE_CHECKING:
    from customer_management.models.address import Address
    from customer_management.models.otp import OneTimePassword


class CustomerStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False)

    mobile_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)
    email_address: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    # bcrypt digest, never the raw secret
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[CustomerStatus] = mapped_column(
        Enum(CustomerStatus, name="customer_status", native_enum=False, length=16),
        nullable=False,
        default=CustomerStatus.INACTIVE,
    )

    addresses: Mapped[list["Address"]] = relationship(
        "Address", back_populates="customer", cascade="all, delete-orphan", order_by="Address.id"
    )
    otps: Mapped[list["OneTimePassword"]] = relationship(
        "OneTimePassword", back_populates="customer", cascade="all, delete-orphan", order_by="OneTimePassword.id"
    )
