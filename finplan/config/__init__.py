"""Configuration package."""

from finplan.config.settings import (
    AppSettings,
    ReportSettings,
    Settings,
    TransferSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ReportSettings",
    "Settings",
    "TransferSettings",
    "get_settings",
    "validate_all_settings",
]
