"""
autotrip configuration.

Pydantic Settings v2. Reads AUTOTRIP_* environment variables and an
optional .env file; CLI flags override these per invocation.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain import compliance_filter

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")


class Settings(BaseSettings):
    """Engine settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOTRIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Evaluation ────────────────────────────────────────────────────────
    default_model: str = "impact"
    # Comma-separated compliance standards, empty for no restriction.
    default_compliance: str = ""

    # ── Collaborators ─────────────────────────────────────────────────────
    reference_data_path: Optional[Path] = None
    router_detour_factor: float = Field(default=1.0, ge=1.0)

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = "WARNING"
    log_format: str = "console"

    @field_validator("default_compliance")
    @classmethod
    def validate_compliance(cls, v: str) -> str:
        compliance_filter(cls._split(v))
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return fmt

    @staticmethod
    def _split(value: str) -> list[str]:
        return [part.strip() for part in value.split(",") if part.strip()]

    @property
    def compliance(self) -> list[str]:
        return self._split(self.default_compliance)


@lru_cache
def get_settings() -> Settings:
    """Settings, loaded once per process."""
    return Settings()


settings = get_settings()
