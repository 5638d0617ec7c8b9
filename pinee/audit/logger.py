"""
Audit Logger

Writes AuditEvents to the structured log and, when audit storage is
configured, to the AuditLog worksheet.

A failed audit write is logged and swallowed: losing an audit row must
never stop a user from seeing their balance or saving a transaction.
Events of one user action share a correlation ID.
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from pinee.config import get_settings
from pinee.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from pinee.models.transaction import ConsolidationResult, SkippedRecord
from pinee.services.storage import AuditStorageInterface


def configure_logging(debug: bool = False) -> None:
    """JSON log lines in production, readable console output in debug mode."""
    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(debug=get_settings().app.debug_mode)


_SEVERITY_METHODS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
    AuditSeverity.CRITICAL: "critical",
}


class AuditLogger:
    """
    Records audit events.

    Args:
        storage: Where events are persisted. None keeps them in the local
                 log only (tests, dashboard without Sheets).
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Record one event.

        Returns False only when persisting to storage failed.
        """
        emit = getattr(self._logger, _SEVERITY_METHODS[event.severity])
        emit("audit_event", **event.to_log_dict())

        if self._storage is None:
            return True

        try:
            return await self._storage.append_event(event)
        except Exception as e:
            self._logger.error(
                "audit_storage_failed",
                event_id=str(event.event_id),
                event_type=event.event_type.value,
                error=str(e),
            )
            return False

    async def log_transactions_loaded(
        self,
        user_id: Optional[str],
        count: int,
        date_from: Optional[str],
        date_to: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.transactions_loaded(
            user_id, count, date_from, date_to, correlation_id=correlation_id,
        ))

    async def log_records_skipped(
        self,
        skipped: list[SkippedRecord],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Nothing is written when no document was skipped."""
        if skipped:
            await self.log(AuditEventBuilder.records_skipped(
                [item.model_dump() for item in skipped], correlation_id=correlation_id,
            ))

    async def log_balance_consolidated(
        self,
        result: ConsolidationResult,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.balance_consolidated(
            consolidated_balance=str(result.consolidated_balance),
            invested_balance=str(result.invested_balance),
            included_count=result.included_count,
            skipped_count=result.skipped_count,
            correlation_id=correlation_id,
        ))

    async def log_transaction_saved(
        self,
        transaction_id: Optional[str],
        title: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_saved(
            transaction_id, title, amount, correlation_id=correlation_id,
        ))

    async def log_transaction_updated(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_updated(
            transaction_id, correlation_id=correlation_id,
        ))

    async def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_deleted(
            transaction_id, correlation_id=correlation_id,
        ))

    async def log_status_toggled(
        self,
        transaction_id: str,
        old_status: str,
        new_status: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.status_toggled(
            transaction_id, old_status, new_status, correlation_id=correlation_id,
        ))

    async def log_investment_transferred(
        self,
        source_id: str,
        investment_id: str,
        amount: str,
        full_transfer: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.investment_transferred(
            source_id, investment_id, amount, full_transfer, correlation_id=correlation_id,
        ))

    async def log_export_completed(
        self,
        file_path: str,
        row_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.export_completed(
            file_path, row_count, correlation_id=correlation_id,
        ))

    async def log_export_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.export_failed(
            error_message, correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(
            operation, error_message, correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.system_error(
            error_type, error_message, details=details, correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """New ID shared by every event of one user action (a screen load, a save)."""
    return uuid4()
