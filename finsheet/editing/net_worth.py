"""Net worth row edits."""

from typing import Any, Sequence

from finsheet.models.finance import NET_WORTH_BUCKETS, NetWorthRow


def edit_net_worth_row(row: NetWorthRow, **changes: Any) -> NetWorthRow:
    """
    A copy of `row` with some buckets changed.

    The copy goes back through validation, so an edited debt is stored as
    its magnitude just like a decoded one. Totals follow from the buckets.
    """
    unknown = set(changes) - set(NET_WORTH_BUCKETS) - {"month"}
    if unknown:
        raise ValueError(f"Unknown net worth fields: {sorted(unknown)}")

    data = row.model_dump(include={"month", *NET_WORTH_BUCKETS})
    data.update(changes)
    return NetWorthRow.model_validate(data)


def revalidate_net_worth_row(row: NetWorthRow) -> NetWorthRow:
    """
    Rebuild `row` from its month and buckets.

    model_copy(update=...) skips validation, so a row edited that way can
    carry a negative debt until it is rebuilt here.
    """
    return NetWorthRow.model_validate(row.model_dump(include={"month", *NET_WORTH_BUCKETS}))


def replace_net_worth_row(rows: Sequence[NetWorthRow], edited: NetWorthRow) -> list[NetWorthRow]:
    """Replace the row for `edited.month` (or add it), sorted by month."""
    edited = revalidate_net_worth_row(edited)
    kept = [row for row in rows if row.month != edited.month]
    return sorted(kept + [edited], key=lambda r: r.month)
