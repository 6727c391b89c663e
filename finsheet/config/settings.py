"""
Configuration Management for finsheet

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Workbook layout conventions (header labels, block offsets, column
positions) are data, not code: when a spreadsheet layout changes,
only these settings change.
"""

from functools import lru_cache
from typing import Union

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finsheet.models.finance import NET_WORTH_BUCKETS


DEFAULT_STATIC_LABELS = ["קטגוריה ראשית", "תת-קטגוריה", "הוצאות"]

# Column positions in the net worth tracking sheet (0-based).
DEFAULT_NET_WORTH_COLUMNS = {
    "month": 0,
    "cash": 1,
    "mmf": 2,
    "bonds": 3,
    "stocks": 4,
    "hishtalmut": 5,
    "provident_fund": 6,
    "real_estate_investment": 7,
    "crypto": 10,
    "pension": 12,
    "car": 13,
    "residence": 14,
    "other_non_liquid": 15,
    "mortgage": 18,
    "loans": 19,
    "credit_card_debt": 20,
}


class FinanceSheetSettings(BaseSettings):
    """Layout of the monthly expenses & income workbook."""

    model_config = SettingsConfigDict(
        env_prefix="FINSHEET_FINANCE_",
        extra="ignore"
    )

    sheet: Union[int, str] = Field(
        default=0,
        description="Sheet name or index to read"
    )
    static_labels: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STATIC_LABELS),
        min_length=3,
        max_length=3,
        description="Header labels of the main category, sub category and line item columns"
    )
    header_search_rows: int = Field(
        default=30,
        ge=1,
        description="How many leading rows to scan for the header row"
    )

    # Plausible Excel serial range for month headers (exclusive bounds)
    serial_min: float = Field(default=20000)
    serial_max: float = Field(default=60000)

    # Block boundaries, relative to the first row below the header
    expenses_start: int = Field(default=0, ge=0)
    expenses_end: int = Field(default=57, ge=0)
    income_start: int = Field(default=57, ge=0)
    income_end: int = Field(default=68, ge=0)

    @model_validator(mode='after')
    def validate_blocks(self) -> 'FinanceSheetSettings':
        """Block ranges must be ordered and must not overlap."""
        if self.expenses_end < self.expenses_start:
            raise ValueError("Expenses block end cannot be before its start")
        if self.income_end < self.income_start:
            raise ValueError("Income block end cannot be before its start")
        if self.expenses_start < self.income_end and self.income_start < self.expenses_end:
            raise ValueError("Expenses and income blocks overlap")
        if self.serial_max <= self.serial_min:
            raise ValueError("serial_max must be greater than serial_min")
        return self

    @property
    def expenses_block(self) -> tuple[int, int]:
        return self.expenses_start, self.expenses_end

    @property
    def income_block(self) -> tuple[int, int]:
        return self.income_start, self.income_end


class NetWorthSheetSettings(BaseSettings):
    """Layout of the net worth tracking workbook."""

    model_config = SettingsConfigDict(
        env_prefix="FINSHEET_NET_WORTH_",
        extra="ignore"
    )

    sheet_name: str = Field(
        default="מעקב שווי נקי",
        description="Sheet to read (falls back to the first sheet)"
    )
    header_row: int = Field(
        default=5,
        ge=0,
        description="0-based index of the header row; data starts on the next row"
    )
    columns: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_NET_WORTH_COLUMNS),
        description="Bucket name -> 0-based column index"
    )

    @field_validator('columns')
    @classmethod
    def validate_columns(cls, v: dict[str, int]) -> dict[str, int]:
        """Every bucket (and the month column) needs a position."""
        missing = [name for name in ("month", *NET_WORTH_BUCKETS) if name not in v]
        if missing:
            raise ValueError(f"Net worth column layout is missing: {', '.join(missing)}")
        negative = [name for name, idx in v.items() if idx < 0]
        if negative:
            raise ValueError(f"Column positions cannot be negative: {', '.join(negative)}")
        return v


class ProjectionSettings(BaseSettings):
    """Net worth trend projection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINSHEET_PROJECTION_",
        extra="ignore"
    )

    window_months: int = Field(
        default=24,
        ge=1,
        description="Trailing rows used to fit the trend"
    )
    horizon_months: int = Field(
        default=12,
        ge=0,
        le=600,
        description="How many months to project forward"
    )


class FISettings(BaseSettings):
    """Financial independence ratio configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINSHEET_FI_",
        extra="ignore"
    )

    trailing_months: int = Field(
        default=12,
        ge=1,
        description="Months of expenses summed into annual expenses"
    )
    fi_multiple: float = Field(
        default=25.0,
        gt=0,
        description="FI ratio considered financially independent"
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

    max_upload_size_mb: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Maximum workbook size in MB"
    )

    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


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

    @property
    def finance_sheet(self) -> FinanceSheetSettings:
        return FinanceSheetSettings()

    @property
    def net_worth_sheet(self) -> NetWorthSheetSettings:
        return NetWorthSheetSettings()

    @property
    def projection(self) -> ProjectionSettings:
        return ProjectionSettings()

    @property
    def fi(self) -> FISettings:
        return FISettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}
    settings = get_settings()

    for name in ("finance_sheet", "net_worth_sheet", "projection", "fi", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
