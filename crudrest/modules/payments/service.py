"""Persistence service for payments."""

from crudrest.services.crud import SqlAlchemyCrudService
from crudrest.services.crud.sqlalchemy import SessionFactory

from .models import Payment
from .schemas import PaymentSchema


def create_payment_service(session_factory: SessionFactory) -> SqlAlchemyCrudService[Payment]:
    """Build the durable payment service."""
    return SqlAlchemyCrudService(session_factory, Payment, PaymentSchema)
