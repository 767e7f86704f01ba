"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, no scattered magic strings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        api_prefix: Path prefix for every marketplace route.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_enabled: Turn request rate limiting on or off.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for history and other multi-query reads.
        max_request_size_bytes: Maximum allowed request body size.
        cache_ttl_seconds: Lifetime of cached list responses.
        redis_url: Redis connection URL. The in-process cache is used when unset.

    Database settings: DATABASE_URL wins when set; otherwise the DSN is
    built from the postgres_* values.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Super Farmer"
    version: str = "0.1.0"
    api_prefix: str = "/api/v1"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"
    rate_limit_heavy: str = "30/minute"
    max_request_size_bytes: int = 1_048_576  # 1 MB

    cache_ttl_seconds: int = 180
    redis_url: Optional[str] = None

    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "superfarmer"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    auto_create_schema: bool = False

    def get_database_dsn(self) -> str:
        """Return the effective database DSN.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
