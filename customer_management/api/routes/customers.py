from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, Query
from pydantic import EmailStr
from sqlalchemy.orm import Session

from customer_management.core.config import get_settings
from customer_management.core.credentials import CredentialGenerator, get_credential_generator
from customer_management.core.deps import get_db
from customer_management.schemas.customer import (
    CustomerCreate,
    CustomerCreatedOut,
    CustomerOut,
    CustomerPage,
    CustomerSortField,
    CustomerUpdate,
    EmailAddressUpdate,
    MobileNumberUpdate,
    OtpActivation,
    PasswordUpdate,
)
from customer_management.services import customer_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


@router.post("", response_model=CustomerCreatedOut)
def create_customer(
    payload: CustomerCreate,
    db: Session = Depends(get_db),
    generator: CredentialGenerator = Depends(get_credential_generator),
):
    return customer_service.create_customer(db, payload, generator=generator)


@router.get("", response_model=CustomerPage)
def list_customers(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: CustomerSortField = Query(default=CustomerSortField.created_at, alias="sortBy"),
    db: Session = Depends(get_db),
):
    return customer_service.list_customers(db, page=page, size=size, sort_by=sort_by)


# Lookups by natural key are declared before the /{customer_id} routes


@router.get("/by-mobile/{mobile_number}", response_model=CustomerOut)
def get_by_mobile_number(mobile_number: str, db: Session = Depends(get_db)):
    return customer_service.get_customer_by_mobile_number(db, mobile_number)


@router.get("/by-email/{email_address}", response_model=CustomerOut)
def get_by_email_address(email_address: EmailStr, db: Session = Depends(get_db)):
    return customer_service.get_customer_by_email_address(db, str(email_address))


@router.get("/by-full-name/{full_name}", response_model=CustomerOut)
def get_by_full_name(full_name: str, db: Session = Depends(get_db)):
    return customer_service.get_customer_by_full_name(db, full_name)


@router.patch("/by-mobile/{mobile_number}/mobile", response_model=CustomerOut)
def update_mobile_number(mobile_number: str, payload: MobileNumberUpdate, db: Session = Depends(get_db)):
    logger.info("Updating mobile number for %s", mobile_number)
    return customer_service.update_mobile_number(db, mobile_number, payload.new_mobile_number)


@router.patch("/by-mobile/{mobile_number}/email", response_model=CustomerOut)
def update_email_address(mobile_number: str, payload: EmailAddressUpdate, db: Session = Depends(get_db)):
    logger.info("Updating email for %s", mobile_number)
    return customer_service.update_email_address(db, mobile_number, str(payload.new_email_address))


@router.patch("/by-mobile/{mobile_number}/password", response_model=CustomerOut)
def change_password(mobile_number: str, payload: PasswordUpdate, db: Session = Depends(get_db)):
    logger.info("Changing password for %s", mobile_number)
    return customer_service.update_password(db, mobile_number, payload.new_password)


@router.patch("/by-mobile/{mobile_number}/activate", response_model=CustomerOut)
def activate_by_otp(mobile_number: str, payload: OtpActivation, db: Session = Depends(get_db)):
    logger.info("Activating customer %s", mobile_number)
    return customer_service.activate_customer_by_otp(db, mobile_number, payload.otp)


@router.patch("/forgot-password/{mobile_number}/{new_password}/{confirm_password}", response_model=CustomerOut)
def forgot_password(
    mobile_number: str,
    new_password: str = Path(min_length=6, max_length=128),
    confirm_password: str = Path(min_length=1, max_length=128),
    db: Session = Depends(get_db),
):
    logger.info("Processing forgot password for %s", mobile_number)
    return customer_service.forget_password(db, mobile_number, new_password, confirm_password)


@router.delete("/by-mobile/{mobile_number}", response_model=CustomerOut)
def delete_by_mobile_number(mobile_number: str, db: Session = Depends(get_db)):
    return customer_service.delete_customer_by_mobile_number(db, mobile_number)


@router.delete("/by-email/{email_address}", response_model=CustomerOut)
def delete_by_email_address(email_address: EmailStr, db: Session = Depends(get_db)):
    return customer_service.delete_customer_by_email_address(db, str(email_address))


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return customer_service.get_customer_by_id(db, customer_id)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, payload: CustomerUpdate, db: Session = Depends(get_db)):
    logger.info("Updating full customer details for id=%s", customer_id)
    return customer_service.update_customer(db, customer_id, payload)


@router.delete("/{customer_id}", response_model=CustomerOut)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    logger.info("Deleting customer with id=%s", customer_id)
    return customer_service.delete_customer(db, customer_id)


@router.delete("/{customer_id}/purge", response_model=CustomerOut)
def purge_customer(customer_id: int, db: Session = Depends(get_db)):
    logger.info("Purging customer with id=%s", customer_id)
    return customer_service.purge_customer(db, customer_id)
