"""Services package."""

from finsheet.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageError,
)
from finsheet.services.workbook import (
    SheetNotFoundError,
    WorkbookDecodeError,
    WorkbookError,
    WorkbookReader,
    WorkbookTooLargeError,
    read_grid,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "StorageError",
    # Workbook services
    "SheetNotFoundError",
    "WorkbookDecodeError",
    "WorkbookError",
    "WorkbookReader",
    "WorkbookTooLargeError",
    "read_grid",
]
