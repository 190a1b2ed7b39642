"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from cashflow_planner.domain.models import DetectionOptions


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "cashflow-planner"
    log_level: str = "INFO"

    # Pattern detector
    amount_bucket_cents: int = 5
    max_amount_variation: float = 0.10  # coefficient of variation
    min_vendor_token_share: float = 0.5
    default_min_occurrences: int = 3
    high_confidence_min_occurrences: int = 2  # checks, subscriptions
    income_min_occurrences: int = 2
    stale_after_months: int = 6

    # Payoff simulator
    max_payoff_months: int = 600  # 50 years
    minimum_payment_floor_pct: float = 0.02

    def detection_options(self) -> DetectionOptions:
        """Detector thresholds as a plain domain object"""
        return DetectionOptions(
            amount_bucket_cents=self.amount_bucket_cents,
            max_amount_variation=self.max_amount_variation,
            min_vendor_token_share=self.min_vendor_token_share,
            default_min_occurrences=self.default_min_occurrences,
            high_confidence_min_occurrences=self.high_confidence_min_occurrences,
            income_min_occurrences=self.income_min_occurrences,
            stale_after_months=self.stale_after_months,
        )


settings = Settings()
