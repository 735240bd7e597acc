# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from beartype import beartype
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEADMARKET_",
        env_file=None,
        env_file_encoding="utf-8",
        frozen=True,  # Immutable settings
        validate_default=True,
        extra="forbid",
    )

    # API Configuration
    app_name: str = Field(
        default="LeadMarket",
        description="Application name",
        min_length=1,
    )
    api_env: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="API environment",
    )
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    api_cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins",
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    # Lead caps
    reference_timezone: str = Field(
        default="UTC",
        min_length=1,
        description="Timezone that defines Monday 00:00 and the 1st of the month for lead caps",
    )

    # Contract terms (fair market bounds)
    min_rate_per_lead: Decimal = Field(
        default=Decimal("5"),
        gt=Decimal("0"),
        description="Minimum rate a buyer may offer per lead",
    )
    max_rate_per_lead: Decimal = Field(
        default=Decimal("500"),
        gt=Decimal("0"),
        description="Maximum rate a buyer may offer per lead",
    )
    default_rate_per_lead: Decimal = Field(
        default=Decimal("50"),
        gt=Decimal("0"),
        description="Rate used when an invitation carries no explicit rate",
    )
    default_termination_notice_days: int = Field(
        default=7,
        ge=0,
        le=365,
        description="Termination notice used when terms do not specify one",
    )
    agreement_version: str = Field(
        default="1.0.0",
        min_length=1,
        description="Version of the contract terms for legal tracking",
    )
    enforce_exclusivity: bool = Field(
        default=False,
        description="Refuse a second active connection when any involved terms are exclusive",
    )

    @field_validator("reference_timezone")
    @classmethod
    def validate_timezone(cls: type["Settings"], v: str) -> str:
        """Ensure the reference timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown reference timezone: {v}") from exc
        return v

    @field_validator("max_rate_per_lead")
    @classmethod
    def validate_rate_bounds(
        cls: type["Settings"], v: Decimal, info: ValidationInfo
    ) -> Decimal:
        """Ensure max rate is not below min rate."""
        if "min_rate_per_lead" in info.data:
            min_rate = info.data["min_rate_per_lead"]
            if v < min_rate:
                raise ValueError(
                    f"max_rate_per_lead ({v}) must be >= min_rate_per_lead ({min_rate})"
                )
        return v

    @property
    @beartype
    def timezone(self) -> ZoneInfo:
        """Reference timezone as a ZoneInfo."""
        return ZoneInfo(self.reference_timezone)

    @property
    @beartype
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.api_env == "production"


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None
