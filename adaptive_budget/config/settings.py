"""
Configuration Management for Adaptive Budget

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine never loads settings itself - the orchestrator loads them
once and passes them down, so every engine function stays pure.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adaptive_budget.models.budget import BudgetCategoryId


# Ordered: the first category with a matching keyword wins.
DEFAULT_CATEGORY_KEYWORDS: dict[BudgetCategoryId, tuple[str, ...]] = {
    BudgetCategoryId.ESSENTIALS: (
        "food", "groceries", "rent", "utilities", "electricity", "water", "gas",
    ),
    BudgetCategoryId.FUEL_WORK: (
        "fuel", "petrol", "diesel", "uber", "rapido", "zomato", "swiggy",
    ),
    BudgetCategoryId.SUBSCRIPTIONS: (
        "subscription", "netflix", "spotify", "prime", "disney",
    ),
    BudgetCategoryId.DISCRETIONARY: (
        "shopping", "entertainment", "leisure", "dining", "restaurant", "cafe",
    ),
}


class BudgetSettings(BaseSettings):
    """Windows, defaults and the keyword table used by the budget engine."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_",
        extra="ignore"
    )

    lookback_days: int = Field(
        default=90,
        ge=1,
        le=366,
        description="How many days of transactions to fetch per request"
    )
    income_window_months: int = Field(
        default=2,
        ge=1,
        le=12,
        description="Window (in 30-day months) for the expected income estimate"
    )
    expense_window_days: int = Field(
        default=60,
        ge=1,
        le=366,
        description="Window for the average monthly expense estimate"
    )
    volatility_window_days: int = Field(
        default=90,
        ge=1,
        le=366,
        description="Window for the income volatility estimate"
    )
    coverage_window_days: int = Field(
        default=30,
        ge=1,
        le=366,
        description="Window used to measure data coverage for the confidence score"
    )
    recent_income_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Window for the recent-income mode suggestion"
    )
    default_volatility: float = Field(
        default=0.3,
        ge=0.0,
        description="Volatility assumed when fewer than two months of income exist"
    )
    expense_fallback: float = Field(
        default=10000.0,
        gt=0.0,
        description="Monthly expenses assumed when there is no expense history"
    )
    buffer_history_days: int = Field(
        default=30,
        ge=1,
        le=366,
        description="Number of trailing days in the buffer history series"
    )
    outlook_lookback_days: int = Field(
        default=186,
        ge=1,
        le=731,
        description="How many days of transactions the planner outlook reads (six months of income)"
    )
    category_keywords: dict[BudgetCategoryId, list[str]] = Field(
        default_factory=lambda: {
            category: list(keywords)
            for category, keywords in DEFAULT_CATEGORY_KEYWORDS.items()
        },
        description="Keyword table mapping free-text categories to budget categories"
    )

    @field_validator('category_keywords')
    @classmethod
    def validate_category_keywords(
        cls,
        v: dict[BudgetCategoryId, list[str]],
    ) -> dict[BudgetCategoryId, list[str]]:
        """The growth bucket is savings, never a spending category."""
        if BudgetCategoryId.GROWTH in v:
            raise ValueError("The growth bucket cannot have category keywords")
        return {
            category: [kw.strip().lower() for kw in keywords if kw.strip()]
            for category, keywords in v.items()
        }


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet holding transactions"
    )
    profiles_sheet_name: str = Field(
        default="Profiles",
        description="Name of the sheet holding per-user buffer balances"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


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
    persist_audit_events: bool = Field(
        default=False,
        description="Write audit events to the audit sheet as well as the local log"
    )


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

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

    for name in ("budget", "google_sheets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
