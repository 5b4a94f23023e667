"""Conversions between request shapes, storage records and response shapes.

Nothing here touches the session or applies business rules; the password
digest is never copied onto a response.
"""
from __future__ import annotations

from customer_management.models.address import Address
from customer_management.models.customer import Customer, CustomerStatus
from customer_management.models.otp import OneTimePassword
from customer_management.schemas.customer import (
    AddressIn,
    AddressOut,
    CustomerCreate,
    CustomerCreatedOut,
    CustomerOut,
    CustomerUpdate,
)


def to_customer_model(payload: CustomerCreate | CustomerUpdate, password_hash: str) -> Customer:
    return Customer(
        first_name=payload.first_name,
        last_name=payload.last_name,
        full_name=payload.full_name,
        age=payload.age,
        mobile_number=payload.mobile_number,
        email_address=str(payload.email_address),
        password=password_hash,
        status=CustomerStatus.INACTIVE,
    )


def copy_customer_fields(payload: CustomerUpdate, customer: Customer) -> Customer:
    customer.first_name = payload.first_name
    customer.last_name = payload.last_name
    customer.full_name = payload.full_name
    customer.age = payload.age
    customer.mobile_number = payload.mobile_number
    customer.email_address = str(payload.email_address)
    return customer


def to_address_model(payload: AddressIn, customer: Customer | None = None) -> Address:
    address = Address(
        street=payload.street,
        city=payload.city,
        state=payload.state,
        country=payload.country,
        address_type=payload.address_type,
        pincode=payload.pincode,
    )
    if customer is not None:
        address.customer = customer
    return address


def to_otp_model(customer: Customer, otp_value: str) -> OneTimePassword:
    return OneTimePassword(otp_value=otp_value, customer=customer)


def to_address_out(address: Address) -> AddressOut:
    return AddressOut.model_validate(address)


def _customer_fields(customer: Customer) -> dict:
    return dict(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        full_name=customer.full_name,
        age=customer.age,
        mobile_number=customer.mobile_number,
        email_address=customer.email_address,
        status=customer.status,
        created_at=customer.created_at,
        updated_at=customer.updated_at,
        addresses=[to_address_out(a) for a in customer.addresses],
    )


def to_customer_out(customer: Customer) -> CustomerOut:
    return CustomerOut(**_customer_fields(customer))


def to_customer_created(customer: Customer, otp: OneTimePassword) -> CustomerCreatedOut:
    return CustomerCreatedOut(**_customer_fields(customer), otp=otp.otp_value)
