"""
FI Ratio Engine

Joins net worth with monthly cash flow and measures progress towards
financial independence: net worth divided by the trailing year of
expenses.
"""

from collections import deque
from typing import Optional, Sequence

from finsheet.config import FISettings
from finsheet.models.finance import FIProgressRow, MonthlyAggregate, NetWorthRow


def fi_progress_percent(net_worth: float, annual_expenses: float, fi_multiple: float) -> float:
    """Percent of the way to fi_multiple x annual expenses, within 0..100."""
    if annual_expenses <= 0:
        return 0.0
    percent = net_worth / (annual_expenses * fi_multiple) * 100
    return max(0.0, min(percent, 100.0))


def build_fi_progress(
    net_worth: Sequence[NetWorthRow],
    aggregates: Sequence[MonthlyAggregate],
    settings: Optional[FISettings] = None,
) -> list[FIProgressRow]:
    """
    FI progress for every month present in both series (inner join).

    Annual expenses are the sum of the last `trailing_months` available
    months of expenses, up to and including the current one. Early in
    the series the window simply holds fewer months.
    """
    settings = settings or FISettings()
    cash_flow = {aggregate.month: aggregate for aggregate in aggregates}

    joined = sorted(
        ((row, cash_flow[row.month]) for row in net_worth if row.month in cash_flow),
        key=lambda pair: pair[0].month,
    )

    window: deque[float] = deque(maxlen=settings.trailing_months)
    progress = []
    for balance, flow in joined:
        window.append(flow.total_expenses)
        annual = sum(window)
        progress.append(FIProgressRow(
            month=balance.month,
            balance=balance,
            cash_flow=flow,
            annual_expenses=annual,
            fi_ratio=balance.net_worth / annual if annual > 0 else None,
            fi_progress=fi_progress_percent(balance.net_worth, annual, settings.fi_multiple),
        ))
    return progress
