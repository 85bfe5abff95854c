"""mcpay service configuration."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_WEBHOOK_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """Environment-driven settings for the payment webhook."""

    webhook_secret: str = DEFAULT_WEBHOOK_SECRET
    environment: str = "development"

    host: str = "0.0.0.0"
    port: int = Field(default=3000, validation_alias=AliasChoices("MC_PORT", "PORT"))

    ledger_capacity: int = Field(default=200, gt=0)

    cors_origins: list[str] = ["*"]
    # slowapi limit string; empty disables rate limiting
    rate_limit: str = "120/minute"

    log_level: str = "INFO"

    model_config = {
        "env_prefix": "MC_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("webhook_secret")
    @classmethod
    def _secret_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("webhook_secret must not be empty")
        return value

    @property
    def uses_default_secret(self) -> bool:
        return self.webhook_secret == DEFAULT_WEBHOOK_SECRET

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in ("production", "prod")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
