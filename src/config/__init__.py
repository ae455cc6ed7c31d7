"""Configuration package."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import (
    AppSettings,
    GeminiSettings,
    GoogleSheetsSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GeminiSettings",
    "GoogleSheetsSettings",
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "validate_all_settings",
]
