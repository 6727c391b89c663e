"""Chart-ready derivations over the parsed and aggregated data."""

from datetime import date
from typing import Iterable, Optional, Sequence

from finsheet.models.finance import (
    CategoryAmount,
    MonthlyAggregate,
    SavingsPoint,
    SavingsSummary,
    TimeSeriesEntry,
)


OTHER_CATEGORY = "אחר"


def expense_breakdown(entries: Iterable[TimeSeriesEntry], month: date) -> list[CategoryAmount]:
    """
    Amount per line item for one month, in order of first appearance.

    Entries without a line item are grouped under "אחר" (other).
    """
    amounts: dict[str, float] = {}
    for entry in entries:
        if entry.month != month:
            continue
        category = entry.line_item or OTHER_CATEGORY
        amounts[category] = amounts.get(category, 0.0) + entry.amount

    return [CategoryAmount(category=c, amount=a) for c, a in amounts.items()]


def savings_series(aggregates: Sequence[MonthlyAggregate]) -> list[SavingsPoint]:
    """Monthly savings with a running total, in month order."""
    points = []
    cumulative = 0.0
    for aggregate in sorted(aggregates, key=lambda a: a.month):
        cumulative += aggregate.savings
        points.append(SavingsPoint(
            month=aggregate.month,
            savings=aggregate.savings,
            cumulative=cumulative,
        ))
    return points


def savings_summary(aggregates: Sequence[MonthlyAggregate]) -> SavingsSummary:
    if not aggregates:
        return SavingsSummary()

    total = sum(a.savings for a in aggregates)
    return SavingsSummary(
        total_cumulative=total,
        average_monthly=total / len(aggregates),
        months=len(aggregates),
    )


def default_month(aggregates: Sequence[MonthlyAggregate]) -> Optional[date]:
    """Latest month with an aggregate, or None when there are none."""
    return max((a.month for a in aggregates), default=None)
