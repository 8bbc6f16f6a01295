"""FastAPI application entry point"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from crudrest import __version__
from crudrest.api import system as system_router
from crudrest.core.config import CrudOptions, settings
from crudrest.core.database import db_manager
from crudrest.core.middleware import CorsMiddleware, RequestTracingMiddleware
from crudrest.modules.customers import CustomerResource, create_customer_service
from crudrest.modules.payments import (
    CustomerPaymentsResource,
    PaymentResource,
    create_payment_service,
)
from crudrest.services.crud.sqlalchemy import SessionFactory
from crudrest.shared.errors import ErrorTranslator, setup_exception_handlers
from crudrest.shared.logging import get_logger, setup_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    setup_logger()
    logger.info(f"Starting {settings.app.name}...")

    db_manager.init()
    if settings.db.create_tables:
        await db_manager.create_tables()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await db_manager.close()
    logger.info("Database connections closed")


def create_app(
    options: CrudOptions | None = None,
    session_factory: SessionFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        options: CRUD behavior switches; read from the environment when omitted.
        session_factory: Session source of the durable services; defaults to
            the global database manager.

    Returns:
        Configured FastAPI application instance.
    """
    options = options or settings.crud
    session_factory = session_factory or db_manager.create_session

    app = FastAPI(
        title=settings.app.name,
        version=__version__,
        debug=settings.app.debug,
        lifespan=lifespan,
        docs_url=f"{settings.app.api_prefix}/docs" if settings.app.debug else None,
        openapi_url=f"{settings.app.api_prefix}/openapi.json" if settings.app.debug else None,
        redirect_slashes=False,
    )

    # Outermost: preflight requests are answered before tracing and routing
    app.add_middleware(RequestTracingMiddleware)
    app.add_middleware(CorsMiddleware, options=options)

    translator = ErrorTranslator(options)
    setup_exception_handlers(app, translator)

    customers = create_customer_service(session_factory)
    payments = create_payment_service(session_factory)
    resources = [
        CustomerResource(customers, options=options, translator=translator),
        PaymentResource(payments, options=options, translator=translator),
        CustomerPaymentsResource(payments, options=options, translator=translator),
    ]
    for resource in resources:
        app.include_router(resource.router, prefix=settings.app.api_prefix)

    # System router (no prefix - accessible at root)
    app.include_router(system_router.router)

    return app


# Create the application instance
app = create_app()
