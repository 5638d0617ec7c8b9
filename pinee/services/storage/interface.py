"""
Storage Interfaces

The mobile app reads Firestore directly; this package only sees the
abstract interfaces below. Tests run against the in-memory backend and the
dashboard against Google Sheets, with the balance code unaware of either.

Transaction storage hands out RAW documents. Parsing into typed records
happens once, in pinee.validation, so every backend gets the same rules.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional
from uuid import UUID

from pinee.models.audit import AuditEvent
from pinee.models.transaction import TransactionRecord

# A raw store document: string keys, values as the store returned them.
# The store's document ID is under "id".
Document = dict[str, Any]


class TransactionStorageInterface(ABC):
    """
    Where transaction documents live.

    Writes take typed records; reads return raw documents.
    """

    @abstractmethod
    async def list_documents(
        self,
        user_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Document]:
        """
        List raw transaction documents.

        Args:
            user_id: Only documents owned by this user
            date_from: Documents dated on or after this day
            date_to: Documents dated on or before this day

        Date filters compare the stored 'yyyy-MM-dd' strings, like the
        app's store queries do. Documents without a date string are
        returned only when no date filter is given.

        Returns:
            Documents, newest date first
        """
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: str) -> Optional[Document]:
        """
        Retrieve a document by its ID.

        Returns:
            The document if found, None otherwise
        """
        pass

    @abstractmethod
    async def save_transaction(self, record: TransactionRecord) -> str:
        """
        Save a new transaction.

        Returns:
            The ID assigned to the stored document

        Raises:
            DuplicateError: If a document with the record's ID exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def update_transaction(self, record: TransactionRecord) -> bool:
        """
        Replace an existing transaction.

        Raises:
            NotFoundError: If the record's document doesn't exist
            StorageError: If update fails
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: str) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if deleted, False if it did not exist
        """
        pass


class AuditStorageInterface(ABC):
    """
    Where audit events are persisted. Append-only.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append one event. Returns True once it is stored.
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events for a correlation ID, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


def in_date_window(
    document: Document,
    date_from: Optional[date],
    date_to: Optional[date],
) -> bool:
    """String comparison on 'yyyy-MM-dd', as document stores do it."""
    if date_from is None and date_to is None:
        return True
    value = document.get("date")
    if not isinstance(value, str):
        return False
    if date_from is not None and value < date_from.isoformat():
        return False
    if date_to is not None and value > date_to.isoformat():
        return False
    return True


def document_sort_key(document: Document) -> str:
    value = document.get("date")
    return value if isinstance(value, str) else ""


class StorageError(Exception):
    """Any failure talking to a storage backend."""
    pass


class NotFoundError(StorageError):
    """The transaction to update or toggle does not exist."""
    pass


class DuplicateError(StorageError):
    """A transaction with the same ID is already stored."""
    pass


class ConnectionError(StorageError):
    """The backend could not be reached or authorized."""
    pass
