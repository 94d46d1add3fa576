"""
Configuration settings for the readpath engine.

Uses Pydantic Settings for environment variable management with .env file support.
Algorithm constants (rating, recommendation scores) are not settings: they live
next to the code that uses them.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="READPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Skill catalog
    # ========================================
    catalog_path: str | None = Field(
        default=None,
        description="Path to a YAML/JSON skill catalog (None for the bundled catalog)",
    )

    # ========================================
    # Recommendation
    # ========================================
    recommend_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Default number of suggestions returned by the recommender",
    )

    # ========================================
    # Rating
    # ========================================
    rd_inactivity_c: float = Field(
        default=10.0,
        gt=0.0,
        description="Glicko RD growth per day of inactivity (c in sqrt(rd^2 + c^2 t))",
    )
    rd_inactivity_grace_days: int = Field(
        default=7,
        ge=0,
        description="Days of inactivity tolerated before RD starts growing",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def get_inactivity_config(self) -> dict[str, float]:
        """Get RD inactivity inflation parameters."""
        return {
            "c": self.rd_inactivity_c,
            "grace_days": self.rd_inactivity_grace_days,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
