"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Async driver -> sync driver, for Alembic
SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql",
    "sqlite+aiosqlite": "sqlite",
}


class Settings(BaseSettings):
    """SpotBnB settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "SpotBnB"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # PostgreSQL, unless DATABASE_URI names another database outright
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "spotbnb"
    postgres_password: str = Field(default="spotbnb_secret")
    postgres_db: str = "spotbnb"
    database_uri: Optional[str] = None
    db_pool_size: int = 20
    db_max_overflow: int = 10

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    jwt_secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    rate_limit_per_minute: int = 100
    cors_origins: List[str] = ["http://localhost:3000"]

    @computed_field
    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL used by the application."""
        if self.database_uri:
            return self.database_uri
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def sync_database_url(self) -> str:
        """``database_url`` with its async driver swapped for a sync one."""
        scheme, sep, rest = self.database_url.partition("://")
        return f"{SYNC_DRIVERS.get(scheme, scheme)}{sep}{rest}"

    @computed_field
    @property
    def redis_url(self) -> str:
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
