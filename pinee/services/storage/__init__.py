"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Google Sheets and in-memory backends are available; both are swappable.
"""

from pinee.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    Document,
    DuplicateError,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)
from pinee.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
)
from pinee.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "Document",
    "TransactionStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryTransactionStorage",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
]
