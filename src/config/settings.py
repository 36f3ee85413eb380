"""Environment configuration and validation.

This module defines strongly-typed service settings loaded from environment variables (optionally
via a local `.env` file).
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    upstream_timeout_s: float | None = Field(default=None, alias="UPSTREAM_TIMEOUT_S")
    max_body_bytes: int = Field(default=1024 * 1024, alias="MAX_BODY_BYTES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Port 0 is allowed and binds an ephemeral port."""

        if not 0 <= value <= 65535:
            raise ValueError("PORT must be within 0..65535")
        return value

    @field_validator("upstream_timeout_s")
    @classmethod
    def validate_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("UPSTREAM_TIMEOUT_S must be positive when set")
        return value

    @field_validator("max_body_bytes")
    @classmethod
    def validate_max_body_bytes(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("MAX_BODY_BYTES must be positive")
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
