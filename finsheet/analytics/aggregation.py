"""
Aggregation Engine

Sums melted entries per month and combines income and expenses into
MonthlyAggregate rows. Pure and deterministic: the same entries always
produce identical aggregates.
"""

from datetime import date
from typing import Iterable

from finsheet.models.finance import MonthlyAggregate, TimeSeriesEntry


def monthly_totals(entries: Iterable[TimeSeriesEntry]) -> dict[date, float]:
    """Sum of amounts per month, keyed and ordered by month."""
    totals: dict[date, float] = {}
    for entry in entries:
        totals[entry.month] = totals.get(entry.month, 0.0) + entry.amount
    return dict(sorted(totals.items()))


def build_monthly_aggregates(
    expenses: Iterable[TimeSeriesEntry],
    income: Iterable[TimeSeriesEntry],
) -> list[MonthlyAggregate]:
    """
    One MonthlyAggregate per month present on BOTH sides.

    A month with only income or only expenses is excluded rather than
    zero-filled; a side that is present with zero-valued entries counts.
    Output is sorted ascending by month.
    """
    expense_totals = monthly_totals(expenses)
    income_totals = monthly_totals(income)

    return [
        MonthlyAggregate.from_totals(
            month=month,
            total_income=income_totals[month],
            total_expenses=expense_totals[month],
        )
        for month in sorted(income_totals.keys() & expense_totals.keys())
    ]
