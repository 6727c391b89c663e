"""
Projection Model

Extrapolates net worth with a log-linear trend: an ordinary least-squares
line of ln(net worth) against the day ordinal of each month, fitted on
the trailing window. Net worth compounds, so a straight line in log space
fits it better than a straight line in value space.

The projected total is split into liquid / non-liquid using the ratio of
the last actual row. This keeps the allocation fixed; it does not model
allocation drift.
"""

import math
from datetime import date
from typing import Optional, Sequence

import numpy as np
import structlog
from dateutil.relativedelta import relativedelta

from finsheet.config import ProjectionSettings
from finsheet.models.finance import NetWorthRow, ProjectedNetWorthRow, RowKind


logger = structlog.get_logger(__name__)


def fit_log_linear(rows: Sequence[NetWorthRow]) -> Optional[tuple[float, float]]:
    """
    (slope, intercept) of ln(net worth) against day ordinal.

    Rows with non-positive net worth are ignored. With fewer than two
    usable points (or all on the same day) the slope is 0 and the
    intercept is the mean log value. Returns None when no row is usable.
    """
    usable = [row for row in rows if row.net_worth > 0]
    if not usable:
        return None

    x = np.array([row.month.toordinal() for row in usable], dtype=float)
    y = np.log(np.array([row.net_worth for row in usable], dtype=float))

    mean_x = float(x.mean())
    mean_y = float(y.mean())
    if len(usable) < 2:
        return 0.0, mean_y

    denominator = float(((x - mean_x) ** 2).sum())
    if denominator == 0:
        return 0.0, mean_y

    slope = float(((x - mean_x) * (y - mean_y)).sum()) / denominator
    return slope, mean_y - slope * mean_x


def liquid_share(row: NetWorthRow) -> float:
    """Liquid fraction of the row's assets; 0 when it holds no assets."""
    total = (row.liquid_total + row.non_liquid_total) or 1
    return row.liquid_total / total


def project_net_worth(
    rows: Sequence[NetWorthRow],
    settings: Optional[ProjectionSettings] = None,
) -> list[ProjectedNetWorthRow]:
    """
    Project net worth for the months after the last actual row.

    Args:
        rows: Actual rows, sorted ascending by month
        settings: Window and horizon; defaults from the environment

    Returns:
        One row per projected month (first of month), tagged Projected.
        Empty when there are no actual rows.
    """
    settings = settings or ProjectionSettings()
    if not rows:
        return []

    last = rows[-1]
    fit = fit_log_linear(rows[-settings.window_months:])
    if fit is None:
        logger.info("projection_degenerate", reason="no_positive_net_worth")

    share = liquid_share(last)
    start = date(last.month.year, last.month.month, 1)

    projected = []
    for offset in range(1, settings.horizon_months + 1):
        month = start + relativedelta(months=offset)
        if fit is None:
            net_worth = last.net_worth
        else:
            slope, intercept = fit
            net_worth = math.exp(intercept + slope * month.toordinal())

        projected.append(ProjectedNetWorthRow(
            month=month,
            kind=RowKind.PROJECTED,
            liquid_total=net_worth * share,
            non_liquid_total=net_worth * (1 - share),
            net_worth=net_worth,
        ))
    return projected


def combine_net_worth_series(
    actual: Sequence[NetWorthRow],
    projected: Sequence[ProjectedNetWorthRow],
) -> list[ProjectedNetWorthRow]:
    """Actual rows followed by projected rows, in one month-ordered series."""
    return [row.as_series_row() for row in actual] + list(projected)
