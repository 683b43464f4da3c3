"""
Configuration and settings for the site backend.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)
    log_level: str = Field(default="INFO")
    # Expects a JSON list when set from the environment.
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Review storage (flat JSON document)
    reviews_file: Path = Field(default=Path("reviews.json"))

    # Outgoing mail (Gmail SMTP by default)
    email_user: Optional[str] = Field(default=None)
    email_pass: Optional[str] = Field(default=None)
    email_to: Optional[str] = Field(default=None)
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=465)
    smtp_use_ssl: bool = Field(default=True)
    smtp_timeout_seconds: float = Field(default=15)

    # Branding used in notification emails
    site_name: str = Field(default="Matrix Abacus")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="ABACUS_USE_IN_MEMORY_BACKENDS"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
