"""Typed settings configuration - single source of truth."""

import json
from functools import lru_cache
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:4000", "https://studio.apollographql.com"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Key-value store
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("redis_url", "TEST_REDIS_CONNECTION_STRING"),
    )

    # Document store
    mongo_url: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("mongo_url", "TEST_MONGO_CONNECTION_STRING"),
    )

    # CORS allow-list (JSON array or comma-separated)
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
        validation_alias=AliasChoices("cors_origins", "LOCAL_CORS_ORIGINS"),
    )

    # Listener
    host: str = "0.0.0.0"
    port: int = 4000
    graphql_path: str = "/graphql"

    # Store readiness
    require_stores_on_startup: bool = False
    store_ping_timeout_seconds: float = 2.0

    # Logging
    log_level: str = "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        raw = value.strip()
        if not raw:
            return []
        if raw.startswith("["):
            return json.loads(raw)
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    @field_validator("graphql_path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        return "/" + value.strip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
