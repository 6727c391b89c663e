"""
Storage Services Package

Provides the audit storage interface and an in-memory implementation.
"""

from finsheet.services.storage.interface import (
    AuditStorageInterface,
    StorageError,
)
from finsheet.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    # Exceptions
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
]
