"""Configuration package."""

from fiado.config.settings import (
    DEFAULT_PAYMENT_METHODS,
    AppSettings,
    GeminiSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_PAYMENT_METHODS",
    "AppSettings",
    "GeminiSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
