"""Base pydantic schemas shared by the entity modules."""

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Base schema with the common configuration.

    Entity schemas inherit from it so that validation reads ORM attributes
    and normalizes strings the same way everywhere.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class EntitySchema(BaseSchema):
    """Schema of an entity with a storage-assigned integer id."""

    id: int | None = Field(
        default=None,
        description="Identifier assigned by storage on first save",
    )


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str = Field(..., description="healthy or unhealthy")
    version: str = Field(..., description="Application version")
    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="State of each backing service",
    )
