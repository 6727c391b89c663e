"""
Net Worth Decoder

Reads the net worth tracking sheet by column POSITION, not by header
text: the sheet's headers are free-form and change between versions,
while the column order is the stable contract. Positions come from
NetWorthSheetSettings.columns.

CRITICAL: Total columns in the sheet are never read. Totals are
recomputed from the buckets by NetWorthRow itself.
"""

from typing import Any, Optional

import structlog

from finsheet.config import NetWorthSheetSettings
from finsheet.ingestion.cells import coerce_amount, coerce_month, is_blank
from finsheet.models.finance import NET_WORTH_BUCKETS, NetWorthRow, PortfolioHolding
from finsheet.models.sheet import RawGrid


logger = structlog.get_logger(__name__)


def _data_rows(grid: RawGrid, settings: NetWorthSheetSettings) -> list[list[Any]]:
    return grid.rows[settings.header_row + 1:]


def _row_month(row: list[Any], grid: RawGrid, settings: NetWorthSheetSettings):
    return coerce_month(RawGrid.cell(row, settings.columns["month"]), grid.epoch)


def decode_row(
    row: list[Any],
    grid: RawGrid,
    settings: NetWorthSheetSettings,
) -> Optional[NetWorthRow]:
    """A NetWorthRow for a data row, or None when it has no usable month."""
    month = _row_month(row, grid, settings)
    if month is None:
        return None

    buckets = {
        name: coerce_amount(RawGrid.cell(row, settings.columns[name]))
        for name in NET_WORTH_BUCKETS
    }
    return NetWorthRow(month=month, **buckets)


def decode_net_worth(
    grid: RawGrid,
    settings: Optional[NetWorthSheetSettings] = None,
) -> tuple[list[NetWorthRow], int]:
    """
    Decode every data row below the header.

    Rows without a parseable month are dropped, not repaired.

    Returns:
        (rows sorted ascending by month, number of non-blank rows dropped)
    """
    settings = settings or NetWorthSheetSettings()

    rows = []
    dropped = 0
    for raw in _data_rows(grid, settings):
        decoded = decode_row(raw, grid, settings)
        if decoded is not None:
            rows.append(decoded)
        elif not all(is_blank(value) for value in raw):
            dropped += 1

    rows.sort(key=lambda r: r.month)

    if dropped:
        logger.info(
            "net_worth_rows_dropped",
            sheet=grid.sheet_name,
            dropped=dropped,
            kept=len(rows),
        )
    return rows, dropped


def extract_low_risk_holdings(
    grid: RawGrid,
    settings: Optional[NetWorthSheetSettings] = None,
) -> list[PortfolioHolding]:
    """
    Cash and MMF & deposit balances of the last row with a valid month.

    These are merged into the portfolio allocation view. Stocks and
    crypto are left out: they are tracked per holding in the portfolio.
    """
    settings = settings or NetWorthSheetSettings()

    last_row = next(
        (
            decoded for decoded in (
                decode_row(row, grid, settings)
                for row in reversed(_data_rows(grid, settings))
            )
            if decoded is not None
        ),
        None,
    )
    if last_row is None:
        return []
    return low_risk_holdings(last_row)


def low_risk_holdings(row: NetWorthRow) -> list[PortfolioHolding]:
    """Cash and MMF & deposits of one row, as holdings; zero balances are skipped."""
    cash = row.cash
    deposits = row.mmf

    items = []
    if cash > 0:
        items.append(PortfolioHolding(
            ticker="CASH",
            name="Cash",
            qty=1,
            price=cash,
            value=cash,
            category="Cash",
        ))
    if deposits > 0:
        items.append(PortfolioHolding(
            ticker="MMF+Deposits",
            name="MMF & Deposits",
            qty=1,
            price=deposits,
            value=deposits,
            category="Money Market & Deposits",
        ))
    return items
