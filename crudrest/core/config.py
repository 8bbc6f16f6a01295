"""
Application configuration.

Every group is read from environment variables (or `.env`) with its own prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database connection settings."""

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    # Full SQLAlchemy URL; takes precedence over the PostgreSQL parts below
    url: str = ""
    host: str = "localhost"
    port: int = 5432
    user: str = "crudrest"
    password: str = "crudrest"
    name: str = "crudrest"
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False
    create_tables: bool = True

    @property
    def async_url(self) -> str:
        """URL for the async driver."""
        if self.url:
            return self.url
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"
        )


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    # "console" or "json"
    format: str = "console"


class AppConfig(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    name: str = "crudrest"
    debug: bool = False
    api_prefix: str = "/api"


class CrudOptions(BaseSettings):
    """Switches changing the behavior of every CRUD resource.

    An instance is handed to each resource explicitly, so tests can build
    resources with their own options instead of toggling shared state.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUD_", env_file=".env", extra="ignore", frozen=True
    )

    # Treat query parameters of list/count/delete-all requests as filters
    allow_filters: bool = True
    # Expose GET /_count
    allow_count: bool = True
    # Expose DELETE on the collection path
    allow_delete_all: bool = True
    # Put storage exception class and message into integrity error responses
    return_exception_body: bool = False
    # Add permissive CORS headers to every response
    cors: bool = True
    # Acknowledge OPTIONS preflight requests before routing
    allow_options: bool = True


class Settings:
    """Aggregates all configuration groups."""

    def __init__(self) -> None:
        self.db = DatabaseConfig()
        self.logging = LoggingConfig()
        self.app = AppConfig()
        self.crud = CrudOptions()


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton."""
    return Settings()


settings = get_settings()
