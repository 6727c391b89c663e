"""
Core Data Models for finsheet

These models define the normalized shapes every parsed workbook is turned into.
They are designed to:
1. Be immutable values - a reload replaces a collection, nothing is patched in place
2. Normalize at the boundary (dates to calendar days, debt to non-negative)
3. Be serializable to JSON for snapshots and the UI layer

DESIGN DECISION: Totals on NetWorthRow are computed fields, not stored ones.
netWorth = liquid + nonLiquid - debt therefore holds by construction.
model_copy(update=...) does not run validators, so an edited row must be
rebuilt (see finsheet.editing.net_worth) before debt is known non-negative.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


LIQUID_BUCKETS = (
    "cash",
    "mmf",
    "bonds",
    "stocks",
    "hishtalmut",
    "provident_fund",
    "real_estate_investment",
    "crypto",
)
NON_LIQUID_BUCKETS = ("pension", "car", "residence", "other_non_liquid")
DEBT_BUCKETS = ("mortgage", "loans", "credit_card_debt")
NET_WORTH_BUCKETS = LIQUID_BUCKETS + NON_LIQUID_BUCKETS + DEBT_BUCKETS


def _to_day(v):
    """Collapse datetimes to their calendar day."""
    if isinstance(v, datetime):
        return v.date()
    return v


# =============================================================================
# ENUMS
# =============================================================================

class RowKind(str, Enum):
    """Whether a net worth row was observed or extrapolated."""
    ACTUAL = "Actual"
    PROJECTED = "Projected"


# =============================================================================
# TIME SERIES MODELS
# =============================================================================

class CategoryLabel(BaseModel):
    """
    Three-level category hierarchy of a spreadsheet line.

    Any level may have been inherited from an earlier row (fill-down).
    """
    model_config = ConfigDict(frozen=True)

    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    line_item: Optional[str] = None


class TimeSeriesEntry(BaseModel):
    """One (line item, month) amount, produced by melting a wide row."""
    model_config = ConfigDict(frozen=True)

    month: date = Field(
        ...,
        description="Calendar day of the month column"
    )
    amount: float = Field(
        default=0.0,
        description="Amount for the month (0 for blank cells)"
    )
    label: CategoryLabel = Field(default_factory=CategoryLabel)

    normalize_month = field_validator('month', mode='before')(_to_day)

    @property
    def line_item(self) -> Optional[str]:
        return self.label.line_item


class SchemaEntry(BaseModel):
    """
    One line item of the master schema.

    The schema holds every line item ever observed, so a month edit view
    can list items whose amount for that month is zero or missing.
    """
    model_config = ConfigDict(frozen=True)

    line_item: str = Field(..., min_length=1)
    main_category: Optional[str] = None
    sub_category: Optional[str] = None

    def to_label(self) -> CategoryLabel:
        return CategoryLabel(
            main_category=self.main_category,
            sub_category=self.sub_category,
            line_item=self.line_item,
        )


class MonthlyAggregate(BaseModel):
    """Income, expenses and savings for one month."""
    model_config = ConfigDict(frozen=True)

    month: date
    total_income: float
    total_expenses: float
    savings: float
    savings_rate: float = Field(
        ...,
        description="Savings as a percentage of income"
    )

    normalize_month = field_validator('month', mode='before')(_to_day)

    @classmethod
    def from_totals(cls, month: date, total_income: float, total_expenses: float) -> 'MonthlyAggregate':
        """
        Build an aggregate from the two monthly totals.

        A zero income month divides by 1, so its savings rate is
        savings * 100 rather than undefined.
        """
        savings = total_income - total_expenses
        divisor = total_income if total_income != 0 else 1
        return cls(
            month=month,
            total_income=total_income,
            total_expenses=total_expenses,
            savings=savings,
            savings_rate=savings / divisor * 100,
        )


# =============================================================================
# NET WORTH MODELS
# =============================================================================

class NetWorthBuckets(BaseModel):
    """Asset and debt buckets of the net worth sheet."""
    model_config = ConfigDict(frozen=True)

    month: date

    # Liquid assets
    cash: float = 0.0
    mmf: float = Field(default=0.0, description="Money market funds & deposits")
    bonds: float = 0.0
    stocks: float = 0.0
    hishtalmut: float = Field(default=0.0, description="Keren Hishtalmut")
    provident_fund: float = 0.0
    real_estate_investment: float = 0.0
    crypto: float = 0.0

    # Non-liquid assets
    pension: float = 0.0
    car: float = 0.0
    residence: float = Field(default=0.0, description="Primary residence")
    other_non_liquid: float = 0.0

    # Debts, always stored non-negative
    mortgage: float = 0.0
    loans: float = 0.0
    credit_card_debt: float = 0.0

    normalize_month = field_validator('month', mode='before')(_to_day)

    @field_validator(*DEBT_BUCKETS)
    @classmethod
    def debt_is_non_negative(cls, v: float) -> float:
        """Sheets record debt with either sign; keep the magnitude."""
        return abs(v)


class NetWorthRow(NetWorthBuckets):
    """
    One observed month of the balance sheet.

    CRITICAL: Totals are always derived from the components.
    A total column in the source sheet is never read.
    """

    @computed_field
    @property
    def liquid_total(self) -> float:
        return sum(getattr(self, name) for name in LIQUID_BUCKETS)

    @computed_field
    @property
    def non_liquid_total(self) -> float:
        return sum(getattr(self, name) for name in NON_LIQUID_BUCKETS)

    @computed_field
    @property
    def debt_total(self) -> float:
        return sum(getattr(self, name) for name in DEBT_BUCKETS)

    @computed_field
    @property
    def net_worth(self) -> float:
        return self.liquid_total + self.non_liquid_total - self.debt_total

    def as_series_row(self) -> 'ProjectedNetWorthRow':
        """This row in the combined actual + projected series shape."""
        return ProjectedNetWorthRow(
            kind=RowKind.ACTUAL,
            liquid_total=self.liquid_total,
            non_liquid_total=self.non_liquid_total,
            debt_total=self.debt_total,
            net_worth=self.net_worth,
            **self.model_dump(include={"month", *NET_WORTH_BUCKETS}),
        )


class ProjectedNetWorthRow(NetWorthBuckets):
    """
    A row of the combined net worth series.

    Projected rows carry only totals: their buckets stay zero and the
    totals are stored, since they come from the trend, not from components.
    """

    kind: RowKind = RowKind.PROJECTED
    liquid_total: float = 0.0
    non_liquid_total: float = 0.0
    debt_total: float = 0.0
    net_worth: float = 0.0


class FIProgressRow(BaseModel):
    """Net worth and cash flow of one month, with the FI ratio."""
    model_config = ConfigDict(frozen=True)

    month: date
    balance: NetWorthRow
    cash_flow: MonthlyAggregate
    annual_expenses: float = Field(
        ...,
        description="Sum of the trailing months of expenses, up to and including this one"
    )
    fi_ratio: Optional[float] = Field(
        default=None,
        description="Net worth / annual expenses; None when annual expenses are not positive"
    )
    fi_progress: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Percent of the way to the FI multiple, capped at 100"
    )

    @property
    def net_worth(self) -> float:
        return self.balance.net_worth

    @property
    def total_expenses(self) -> float:
        return self.cash_flow.total_expenses


# =============================================================================
# PORTFOLIO MODELS
# =============================================================================

class PortfolioHolding(BaseModel):
    """A single holding in the portfolio allocation view."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    ticker: str
    name: str
    qty: float = 0.0
    price: float = 0.0
    value: float = 0.0
    category: str = "Uncategorized"

    @property
    def effective_value(self) -> float:
        """Reported value, falling back to qty * price."""
        return self.value or (self.qty * self.price) or 0.0


class CategoryAllocation(BaseModel):
    """Share of the portfolio held in one category."""
    model_config = ConfigDict(frozen=True)

    category: str
    value: float
    weight: float = Field(..., description="Percent of the total portfolio value")


# =============================================================================
# REPORT MODELS
# =============================================================================

class CategoryAmount(BaseModel):
    """Amount spent on one line item in a month."""
    model_config = ConfigDict(frozen=True)

    category: str
    amount: float


class SavingsPoint(BaseModel):
    """Savings of one month and the running total up to it."""
    model_config = ConfigDict(frozen=True)

    month: date
    savings: float
    cumulative: float


class SavingsSummary(BaseModel):
    """Headline savings numbers."""
    model_config = ConfigDict(frozen=True)

    total_cumulative: float = 0.0
    average_monthly: float = 0.0
    months: int = Field(default=0, ge=0)
