"""
Audit Models for PINEE

A user's balance is only as trustworthy as the history behind it, so every
change to a transaction, every balance computation and every export leaves
an AuditEvent behind. Documents the parser had to skip are recorded too.

Audit events are never edited or removed once written.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    # Loading
    TRANSACTIONS_LOADED = "transactions_loaded"
    RECORDS_SKIPPED = "records_skipped"

    # Balance
    BALANCE_CONSOLIDATED = "balance_consolidated"

    # Transaction changes
    TRANSACTION_SAVED = "transaction_saved"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    STATUS_TOGGLED = "status_toggled"
    INVESTMENT_TRANSFERRED = "investment_transferred"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"

    # Failures
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """One entry of the audit trail."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="UTC time of the event"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What the event is about: 'transaction', 'balance', 'export', 'user'
    entity_type: Optional[str] = None
    entity_id: Optional[str] = Field(
        default=None,
        description="Store ID of the transaction or user concerned"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Groups the events of one screen load or user action"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = Field(
        default=False,
        description="True when the user pressed something (save, delete, toggle, export)"
    )

    def to_log_dict(self) -> dict:
        """Flat, JSON-friendly view for structlog."""
        return self.model_dump(mode="json")

    def to_sheets_row(self) -> list:
        """
        One AuditLog worksheet row, in AUDIT_COLUMNS order:
        id, time, type, severity, entity type, entity id, correlation,
        description, details (JSON), error, user action flag.
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            "" if self.correlation_id is None else str(self.correlation_id),
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]

    @classmethod
    def from_sheets_row(cls, row: list) -> "AuditEvent":
        """
        Inverse of to_sheets_row.

        Raises:
            ValueError: If a cell does not hold a valid id, time or enum value
        """
        cells = list(row) + [""] * (11 - len(row))
        return cls(
            event_id=UUID(cells[0]),
            timestamp=datetime.fromisoformat(cells[1]),
            event_type=AuditEventType(cells[2]),
            severity=AuditSeverity(cells[3]),
            entity_type=cells[4] or None,
            entity_id=cells[5] or None,
            correlation_id=UUID(cells[6]) if cells[6] else None,
            description=cells[7],
            details=json.loads(cells[8]) if cells[8] else {},
            error_message=cells[9] or None,
            is_user_action=cells[10].lower() == "true",
        )


def _transaction_event(
    event_type: AuditEventType,
    transaction_id: Optional[str],
    description: str,
    correlation_id: Optional[UUID],
    details: Optional[dict] = None,
) -> AuditEvent:
    return AuditEvent(
        event_type=event_type,
        entity_type="transaction",
        entity_id=transaction_id,
        correlation_id=correlation_id,
        description=description,
        details=details or {},
        is_user_action=True,
    )


class AuditEventBuilder:
    """
    Factory methods for the events PINEE emits.

    Usage:
        event = AuditEventBuilder.status_toggled("abc", "unpaid", "paid")
    """

    @staticmethod
    def transactions_loaded(
        user_id: Optional[str],
        count: int,
        date_from: Optional[str],
        date_to: Optional[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LOADED,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Loaded {count} transaction documents",
            details={"count": count, "date_from": date_from, "date_to": date_to},
        )

    @staticmethod
    def records_skipped(
        skipped: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"{len(skipped)} documents could not be parsed",
            details={"skipped": skipped},
        )

    @staticmethod
    def balance_consolidated(
        consolidated_balance: str,
        invested_balance: str,
        included_count: int,
        skipped_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_CONSOLIDATED,
            entity_type="balance",
            correlation_id=correlation_id,
            description=(
                f"Balance consolidated: R$ {consolidated_balance} "
                f"(invested R$ {invested_balance})"
            ),
            details={
                "consolidated_balance": consolidated_balance,
                "invested_balance": invested_balance,
                "included_count": included_count,
                "skipped_count": skipped_count,
            },
        )

    @staticmethod
    def transaction_saved(
        transaction_id: Optional[str],
        title: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return _transaction_event(
            AuditEventType.TRANSACTION_SAVED,
            transaction_id,
            f"Transaction saved: {title} - R$ {amount}",
            correlation_id,
            details={"title": title, "amount": amount},
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return _transaction_event(
            AuditEventType.TRANSACTION_UPDATED,
            transaction_id,
            "Transaction updated",
            correlation_id,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return _transaction_event(
            AuditEventType.TRANSACTION_DELETED,
            transaction_id,
            "Transaction deleted",
            correlation_id,
        )

    @staticmethod
    def status_toggled(
        transaction_id: str,
        old_status: str,
        new_status: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return _transaction_event(
            AuditEventType.STATUS_TOGGLED,
            transaction_id,
            f"Status changed: {old_status or '-'} -> {new_status}",
            correlation_id,
            details={"old_status": old_status, "new_status": new_status},
        )

    @staticmethod
    def investment_transferred(
        source_id: str,
        investment_id: str,
        amount: str,
        full_transfer: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return _transaction_event(
            AuditEventType.INVESTMENT_TRANSFERRED,
            source_id,
            f"Income transferred to investment: R$ {amount}" + (" (full)" if full_transfer else ""),
            correlation_id,
            details={
                "investment_id": investment_id,
                "amount": amount,
                "full_transfer": full_transfer,
            },
        )

    @staticmethod
    def export_completed(
        file_path: str,
        row_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            correlation_id=correlation_id,
            description=f"Exported {row_count} transactions",
            details={"file_path": file_path, "row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def export_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="export",
            correlation_id=correlation_id,
            description="Export failed",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Unexpected {error_type}",
            error_message=error_message,
            details=details or {},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Storage failed during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
