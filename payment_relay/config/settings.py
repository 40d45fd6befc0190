"""Application settings using Pydantic for environment-based configuration."""
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paystack Configuration
    paystack_secret_key: str = Field(
        ...,
        validation_alias=AliasChoices("paystack_secret_key", "secret"),
        description="Paystack secret key used as the bearer credential (sk_test_...)",
    )
    paystack_base_url: str = Field(
        default="https://api.paystack.co", description="Paystack API base URL"
    )
    gateway_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Timeout for gateway calls in seconds (unset means no timeout)",
    )

    # Database Configuration
    database_url: str = Field(..., description="Async SQLAlchemy database URL")
    database_echo: bool = Field(default=False, description="Echo SQL queries (debug)")

    # Application Configuration
    app_name: str = Field(default="payment-relay", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    allowed_origins: str = Field(
        default="*", description="CORS allowed origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("paystack_secret_key")
    @classmethod
    def validate_paystack_key(cls, v: str) -> str:
        """Validate that the Paystack secret key has a known prefix."""
        v = v.strip()
        if not v.startswith("sk_test_") and not v.startswith("sk_live_"):
            raise ValueError(
                "Invalid Paystack secret key format. Must start with 'sk_test_' or 'sk_live_'"
            )
        return v

    @field_validator("paystack_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL; drop any trailing slash."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Paystack base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"

    @property
    def is_test_mode(self) -> bool:
        """Check if using a Paystack test key."""
        return self.paystack_secret_key.startswith("sk_test_")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
