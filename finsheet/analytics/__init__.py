"""Derived analytics: aggregation, projection, FI progress and reports."""

from finsheet.analytics.aggregation import build_monthly_aggregates, monthly_totals
from finsheet.analytics.fi_ratio import build_fi_progress, fi_progress_percent
from finsheet.analytics.portfolio import (
    allocation_by_category,
    combine_holdings,
    normalize_holding,
)
from finsheet.analytics.projection import (
    combine_net_worth_series,
    fit_log_linear,
    project_net_worth,
)
from finsheet.analytics.reports import (
    default_month,
    expense_breakdown,
    savings_series,
    savings_summary,
)

__all__ = [
    "build_monthly_aggregates",
    "monthly_totals",
    "build_fi_progress",
    "fi_progress_percent",
    "allocation_by_category",
    "combine_holdings",
    "normalize_holding",
    "combine_net_worth_series",
    "fit_log_linear",
    "project_net_worth",
    "default_month",
    "expense_breakdown",
    "savings_series",
    "savings_summary",
]
