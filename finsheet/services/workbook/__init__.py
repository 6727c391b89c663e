"""Workbook reading services."""

from finsheet.services.workbook.reader import (
    SheetNotFoundError,
    WorkbookDecodeError,
    WorkbookError,
    WorkbookReader,
    WorkbookTooLargeError,
    normalize_cell,
    read_grid,
)

__all__ = [
    "SheetNotFoundError",
    "WorkbookDecodeError",
    "WorkbookError",
    "WorkbookReader",
    "WorkbookTooLargeError",
    "normalize_cell",
    "read_grid",
]
