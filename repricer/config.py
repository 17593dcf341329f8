"""
Repricer configuration.

Loads settings from environment variables with validation via Pydantic Settings.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from repricer.core.models import PricingConfig, RoundingRule

# set_margin and the floor price solve against a flat 20% deduction, so a
# margin target at or above 80% has no finite price.
MAX_ACHIEVABLE_MARGIN_PERCENT = 80.0


class AppEnv(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Repricer settings loaded from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Application ──────────────────────────────────────────
    app_name: str = "repricer"
    app_env: AppEnv = AppEnv.DEVELOPMENT

    # ─── Pricing ──────────────────────────────────────────────
    pricing_minimum_margin_percent: float = 15.0
    pricing_default_rounding_rule: RoundingRule = RoundingRule.NEAREST_99P
    pricing_maximum_discount_percent: float = 50.0
    pricing_default_channel_id: str = "amazon"
    proposal_ttl_days: int = 30

    # ─── Observability ────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "auto"

    @model_validator(mode="after")
    def check_pricing_bounds(self) -> "Settings":
        """Reject pricing settings the engine can never satisfy."""
        violations: list[str] = []

        if self.pricing_minimum_margin_percent >= MAX_ACHIEVABLE_MARGIN_PERCENT:
            violations.append(
                f"PRICING_MINIMUM_MARGIN_PERCENT must be below {MAX_ACHIEVABLE_MARGIN_PERCENT:g}"
            )

        if not 0 <= self.pricing_maximum_discount_percent <= 100:
            violations.append("PRICING_MAXIMUM_DISCOUNT_PERCENT must be between 0 and 100")

        if self.proposal_ttl_days < 1:
            violations.append("PROPOSAL_TTL_DAYS must be at least 1")

        if violations:
            raise ValueError(
                "Pricing configuration check failed:\n  - " + "\n  - ".join(violations)
            )

        return self

    @property
    def is_development(self) -> bool:
        return self.app_env == AppEnv.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.app_env == AppEnv.PRODUCTION

    def pricing_config(self) -> PricingConfig:
        """Build the engine's PricingConfig from these settings."""
        return PricingConfig(
            minimum_margin_percent=self.pricing_minimum_margin_percent,
            default_rounding_rule=self.pricing_default_rounding_rule,
            maximum_discount_percent=self.pricing_maximum_discount_percent,
            default_channel_id=self.pricing_default_channel_id,
            proposal_ttl_days=self.proposal_ttl_days,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached repricer settings singleton."""
    return Settings()
