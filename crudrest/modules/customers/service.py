"""Persistence service for customers."""

from crudrest.services.crud import SqlAlchemyCrudService
from crudrest.services.crud.sqlalchemy import SessionFactory

from .models import Customer
from .schemas import CustomerSchema


def create_customer_service(session_factory: SessionFactory) -> SqlAlchemyCrudService[Customer]:
    """Build the durable customer service."""
    return SqlAlchemyCrudService(session_factory, Customer, CustomerSchema)
