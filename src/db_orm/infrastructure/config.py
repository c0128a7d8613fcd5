"""Configuration management for the ORM."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """Connection configuration."""

    dialect: str = Field(default="sqlite", description="SQL dialect of the target database")
    path: str = Field(
        default=":memory:", description="SQLite database file, ':memory:' for a private database"
    )
    foreign_keys: bool = Field(default=True, description="Enforce foreign key constraints")
    timeout_seconds: float = Field(
        default=5.0, ge=0, description="Seconds to wait on a locked database"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="db_orm", description="Service name for tracing")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus metrics port, None to disable"
    )


class Config(BaseSettings):
    """Main configuration for the ORM."""

    model_config = SettingsConfigDict(
        env_prefix="DB_ORM_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
