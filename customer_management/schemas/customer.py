from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from customer_management.models.customer import CustomerStatus

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
MobileNumber = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=32)]
Password = Annotated[str, StringConstraints(min_length=6, max_length=128)]

PINCODE_MIN = 10000
PINCODE_MAX = 9999999


class AddressIn(BaseModel):
    street: NonBlankStr
    city: NonBlankStr
    state: NonBlankStr
    country: NonBlankStr
    address_type: str | None = Field(default=None, max_length=32)
    pincode: int = Field(ge=PINCODE_MIN, le=PINCODE_MAX)


class CustomerCreate(BaseModel):
    first_name: NonBlankStr
    last_name: NonBlankStr
    full_name: NonBlankStr
    age: int = Field(ge=1)
    mobile_number: MobileNumber
    email_address: EmailStr
    # Omitted password: one is generated; the customer sets their own via forgot-password
    password: Password | None = None
    addresses: list[AddressIn] = Field(min_length=1)


class CustomerUpdate(BaseModel):
    """Full replacement of a customer record. Password is kept when omitted."""

    first_name: NonBlankStr
    last_name: NonBlankStr
    full_name: NonBlankStr
    age: int = Field(ge=1)
    mobile_number: MobileNumber
    email_address: EmailStr
    password: Password | None = None
    addresses: list[AddressIn] = Field(min_length=1)


class MobileNumberUpdate(BaseModel):
    new_mobile_number: MobileNumber


class EmailAddressUpdate(BaseModel):
    new_email_address: EmailStr


class PasswordUpdate(BaseModel):
    new_password: Password


class OtpActivation(BaseModel):
    otp: str = Field(min_length=1, max_length=12)


class CustomerSortField(str, enum.Enum):
    id = "id"
    first_name = "first_name"
    last_name = "last_name"
    full_name = "full_name"
    age = "age"
    mobile_number = "mobile_number"
    email_address = "email_address"
    status = "status"
    created_at = "created_at"
    updated_at = "updated_at"


class AddressOut(BaseModel):
    id: int
    street: str
    city: str
    state: str
    country: str
    address_type: str | None
    pincode: int

    class Config:
        from_attributes = True


class CustomerOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    age: int
    mobile_number: str
    email_address: str
    status: CustomerStatus
    created_at: datetime
    updated_at: datetime
    addresses: list[AddressOut] = Field(default_factory=list)


class CustomerCreatedOut(CustomerOut):
    otp: str


class CustomerPage(BaseModel):
    items: list[CustomerOut]
    page: int
    size: int
    sort_by: str
    total: int
    total_pages: int
