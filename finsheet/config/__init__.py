"""Configuration package."""

from finsheet.config.settings import (
    AppSettings,
    FinanceSheetSettings,
    FISettings,
    NetWorthSheetSettings,
    ProjectionSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "FinanceSheetSettings",
    "FISettings",
    "NetWorthSheetSettings",
    "ProjectionSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
