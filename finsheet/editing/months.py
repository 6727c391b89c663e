"""
Month Editing

Builds the editable view of a single month and folds an edited month back
into the entry collection. Edits never patch entries in place: the whole
month is replaced and every derived collection is rebuilt afterwards.
"""

from datetime import date
from typing import Iterable, Sequence

from finsheet.models.finance import SchemaEntry, TimeSeriesEntry


def month_edit_view(
    entries: Iterable[TimeSeriesEntry],
    schema: Sequence[SchemaEntry],
    month: date,
) -> list[TimeSeriesEntry]:
    """
    Every entry of `month`, followed by a zero entry for each schema line
    item the month does not have yet.

    The schema holds every line item ever observed, so an item that was
    skipped this month can still be filled in.
    """
    current = [entry for entry in entries if entry.month == month]
    present = {entry.line_item for entry in current}

    missing = [
        TimeSeriesEntry(month=month, amount=0.0, label=item.to_label())
        for item in schema
        if item.line_item not in present
    ]
    return current + missing


def apply_month_edit(
    entries: Sequence[TimeSeriesEntry],
    month: date,
    edited: Iterable[TimeSeriesEntry],
) -> list[TimeSeriesEntry]:
    """
    Replace all entries of `month` with `edited`.

    Edited entries are re-stamped to `month`. Other months are untouched.
    The result is ordered by month; the sort is stable, so order within a
    month is preserved.
    """
    kept = [entry for entry in entries if entry.month != month]
    replacement = [
        entry if entry.month == month else entry.model_copy(update={"month": month})
        for entry in edited
    ]
    return sorted(kept + replacement, key=lambda e: e.month)
