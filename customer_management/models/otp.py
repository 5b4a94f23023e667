from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from customer_management.db.base import Base
from customer_management.models._mixins import utcnow

if TYPE_CHECKING:
    from customer_management.models.customer import Customer


class OneTimePassword(Base):
    __tablename__ = "customer_otps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    otp_value: Mapped[str] = mapped_column(String(6), nullable=False)

    # No expiry or consumed flag: every issued code stays valid for activation
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="otps")
