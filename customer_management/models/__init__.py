# Import all models so that SQLAlchemy registers them for metadata.create_all
from customer_management.models.customer import Customer, CustomerStatus
from customer_management.models.address import Address
from customer_management.models.otp import OneTimePassword

__all__ = [
    "Customer",
    "CustomerStatus",
    "Address",
    "OneTimePassword",
]
