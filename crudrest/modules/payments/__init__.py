"""Payments module: payments of a customer, flat and nested under the customer."""

from .models import Payment
from .resource import CustomerPaymentsResource, PaymentResource
from .schemas import PaymentSchema
from .service import create_payment_service

__all__ = [
    "CustomerPaymentsResource",
    "Payment",
    "PaymentResource",
    "PaymentSchema",
    "create_payment_service",
]
