"""User edits to months and net worth rows."""

from finsheet.editing.months import apply_month_edit, month_edit_view
from finsheet.editing.net_worth import (
    edit_net_worth_row,
    replace_net_worth_row,
    revalidate_net_worth_row,
)

__all__ = [
    "apply_month_edit",
    "month_edit_view",
    "edit_net_worth_row",
    "replace_net_worth_row",
    "revalidate_net_worth_row",
]
