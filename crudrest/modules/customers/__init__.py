"""Customers module: the customer entity and its REST resource."""

from .models import Customer
from .resource import CustomerResource
from .schemas import CustomerSchema
from .service import create_customer_service

__all__ = [
    "Customer",
    "CustomerResource",
    "CustomerSchema",
    "create_customer_service",
]
