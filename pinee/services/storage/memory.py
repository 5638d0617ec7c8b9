"""
In-Memory Storage

Dictionary-backed storage used by tests and by the dashboard when no
Google Sheets credentials are configured. Documents are copied on the way
in and out so callers cannot mutate stored state.
"""

import copy
from collections.abc import Iterable
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from pinee.models.audit import AuditEvent
from pinee.models.transaction import TransactionRecord
from pinee.services.storage.interface import (
    AuditStorageInterface,
    Document,
    DuplicateError,
    NotFoundError,
    TransactionStorageInterface,
    document_sort_key,
    in_date_window,
)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Transaction storage kept in a dict keyed by document ID."""

    def __init__(self, documents: Optional[Iterable[Document]] = None):
        self._documents: dict[str, Document] = {}
        for document in documents or []:
            self.add_document(document)

    def add_document(self, document: Document) -> str:
        """
        Store a raw document as-is (no validation).

        Lets tests seed malformed documents the parser must cope with.
        """
        stored = copy.deepcopy(document)
        document_id = stored.get("id") or uuid4().hex
        stored["id"] = document_id
        self._documents[document_id] = stored
        return document_id

    async def list_documents(
        self,
        user_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Document]:
        documents = [
            copy.deepcopy(document)
            for document in self._documents.values()
            if (user_id is None or document.get("userId") == user_id)
            and in_date_window(document, date_from, date_to)
        ]
        documents.sort(key=document_sort_key, reverse=True)
        return documents

    async def get_transaction(self, transaction_id: str) -> Optional[Document]:
        document = self._documents.get(transaction_id)
        return copy.deepcopy(document) if document is not None else None

    async def save_transaction(self, record: TransactionRecord) -> str:
        if record.id is not None and record.id in self._documents:
            raise DuplicateError(f"Transaction already exists: {record.id}")

        document = record.to_document()
        if "createdAt" not in document:
            document["createdAt"] = datetime.utcnow().isoformat()
        return self.add_document(document)

    async def update_transaction(self, record: TransactionRecord) -> bool:
        if record.id is None or record.id not in self._documents:
            raise NotFoundError(f"Transaction not found: {record.id}")

        document = record.to_document()
        previous = self._documents[record.id]
        if "createdAt" not in document and "createdAt" in previous:
            document["createdAt"] = previous["createdAt"]
        self._documents[record.id] = document
        return True

    async def delete_transaction(self, transaction_id: str) -> bool:
        return self._documents.pop(transaction_id, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
