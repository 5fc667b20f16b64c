"""
Configuration Management for Fiado Digital

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PAYMENT_METHODS = "Dinheiro,PIX,Cartão,Serviço/Troca"


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=512,
        ge=64,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Model temperature (messages are meant to sound natural)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Local storage
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the debtors/products/transactions files"
    )

    # Dashboard
    top_debtors_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many debtors the dashboard ranking shows"
    )
    recent_transactions_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="How many recent entries the dashboard lists"
    )

    # Payments
    payment_methods: str = Field(
        default=DEFAULT_PAYMENT_METHODS,
        description="Comma-separated list of accepted payment methods"
    )

    @field_validator('payment_methods')
    @classmethod
    def validate_payment_methods(cls, v: str) -> str:
        """At least one payment method must remain after parsing."""
        if not [m for m in v.split(",") if m.strip()]:
            raise ValueError("At least one payment method must be configured")
        return v

    @property
    def payment_methods_list(self) -> list[str]:
        """Get payment methods as a list, in configured order."""
        return [m.strip() for m in self.payment_methods.split(",") if m.strip()]


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Loaded lazily so the ledger works without a Gemini key

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.gemini
        results["gemini"] = True
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
