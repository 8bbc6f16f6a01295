"""Health endpoint."""

from fastapi import APIRouter

from crudrest import __version__
from crudrest.core.database import db_manager
from crudrest.shared.schemas import HealthResponse

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for load balancer."""
    dependencies = {
        "database": "healthy" if await db_manager.health_check() else "unhealthy",
    }
    status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "unhealthy"
    return HealthResponse(status=status, version=__version__, dependencies=dependencies)
