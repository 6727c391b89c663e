"""
Header Locator

Finds the header row of the expenses & income sheet by its static
category labels, and works out which of the other columns are months.
"""

from typing import Any, Optional, Sequence

import structlog

from finsheet.ingestion.cells import DEFAULT_SERIAL_RANGE, coerce_month
from finsheet.ingestion.errors import HeaderNotFoundError
from finsheet.models.sheet import HeaderLocation, MonthColumn, RawGrid


logger = structlog.get_logger(__name__)


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def match_static_columns(row: list[Any], labels: Sequence[str]) -> Optional[dict[str, int]]:
    """
    Column of each label when every label appears exactly once in the row.

    Returns None for rows where a label is missing or repeated.
    """
    hits: dict[str, list[int]] = {label: [] for label in labels}
    for column, value in enumerate(row):
        text = _cell_text(value)
        if text in hits:
            hits[text].append(column)

    if all(len(columns) == 1 for columns in hits.values()):
        return {label: columns[0] for label, columns in hits.items()}
    return None


def decode_month_columns(
    row: list[Any],
    candidates: Sequence[int],
    grid: RawGrid,
    serial_range: tuple[float, float] = DEFAULT_SERIAL_RANGE,
) -> list[MonthColumn]:
    """Candidate columns whose cell in row decodes to a date."""
    months = []
    for column in candidates:
        month = coerce_month(RawGrid.cell(row, column), grid.epoch, serial_range)
        if month is not None:
            months.append(MonthColumn(column=column, month=month))
    return months


def locate_header(
    grid: RawGrid,
    labels: Sequence[str],
    search_rows: int = 30,
    serial_range: tuple[float, float] = DEFAULT_SERIAL_RANGE,
) -> HeaderLocation:
    """
    Find the header row and the month columns.

    Every column of the header row that is not a static label column is
    a month candidate. When no candidate decodes to a date, the row right
    below the header is tried instead (sheets with blank month headers
    whose first data row holds the dates).

    Raises:
        HeaderNotFoundError: If no row in the search window matches
    """
    for row_index in range(min(grid.height, search_rows)):
        row = grid.row(row_index)
        columns = match_static_columns(row, labels)
        if columns is None:
            continue

        static = set(columns.values())
        candidates = [c for c in range(len(row)) if c not in static]

        month_columns = decode_month_columns(row, candidates, grid, serial_range)
        from_next_row = False
        if not month_columns:
            next_row = grid.row(row_index + 1)
            candidates = [c for c in range(max(len(row), len(next_row))) if c not in static]
            month_columns = decode_month_columns(next_row, candidates, grid, serial_range)
            from_next_row = bool(month_columns)

        logger.debug(
            "header_located",
            row=row_index,
            months=len(month_columns),
            from_next_row=from_next_row,
        )
        return HeaderLocation(
            row_index=row_index,
            columns=columns,
            month_columns=month_columns,
            months_from_next_row=from_next_row,
        )

    raise HeaderNotFoundError(labels, search_rows)
