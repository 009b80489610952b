"""
Application settings and configuration management.

This module handles environment variables and application configuration
using Pydantic settings management for type safety and validation.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from commerce_desk.config.thresholds import DEFAULT_THRESHOLD_POLICY, ThresholdPolicy
from commerce_desk.models.schemas import ComplianceMode, MarketplaceKey


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a default, so the desk runs without any .env file.
    DEFAULT_PLATFORMS takes a JSON array or a comma-separated list.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Configuration
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL"
    )
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_file: Optional[Path] = Field(default=None, alias="LOG_FILE")

    # Agent
    agent_name: str = Field(default="Jarvis", alias="AGENT_NAME")

    # Catalog Generation
    default_platforms: Annotated[list[MarketplaceKey], NoDecode] = Field(
        default_factory=lambda: [MarketplaceKey.AMAZON, MarketplaceKey.FLIPKART],
        alias="DEFAULT_PLATFORMS",
    )
    compliance_mode: ComplianceMode = Field(
        default=ComplianceMode.STANDARD,
        alias="COMPLIANCE_MODE",
    )

    # Task Analysis
    thresholds_file: Optional[Path] = Field(default=None, alias="THRESHOLDS_FILE")

    # Output Settings
    output_dir: Path = Field(default=Path("outputs/listing_packs"), alias="OUTPUT_DIR")
    report_dir: Path = Field(default=Path("outputs/reports"), alias="REPORT_DIR")
    report_format: Literal["markdown", "html"] = Field(
        default="markdown",
        alias="REPORT_FORMAT"
    )

    @field_validator("default_platforms", mode="before")
    @classmethod
    def split_platforms(cls, v):
        """Accept a JSON array or a comma-separated string as well as a list."""
        if isinstance(v, str) and v.strip().startswith("["):
            v = json.loads(v)
        elif isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            values = [getattr(part, "value", part) for part in v]
            # Non-string entries are left for enum validation to reject
            return [
                p.strip().lower() if isinstance(p, str) else p
                for p in values
                if not isinstance(p, str) or p.strip()
            ]
        return v

    def load_threshold_policy(self) -> ThresholdPolicy:
        """Threshold policy from THRESHOLDS_FILE, or the built-in default."""
        if self.thresholds_file:
            return ThresholdPolicy.from_file(self.thresholds_file)
        return DEFAULT_THRESHOLD_POLICY


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
