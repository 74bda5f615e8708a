"""Configuration package."""

from adaptive_budget.config.settings import (
    DEFAULT_CATEGORY_KEYWORDS,
    AppSettings,
    BudgetSettings,
    GoogleSheetsSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_CATEGORY_KEYWORDS",
    "AppSettings",
    "BudgetSettings",
    "GoogleSheetsSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
