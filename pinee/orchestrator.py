"""
Main Orchestrator for PINEE

This module ties together all the components and defines the
end-to-end flows for:
1. Balance (store documents -> parse -> consolidate)
2. Transactions (load period -> list rows, save/update/delete, toggle
   status, income to investment transfer, category breakdown, export)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Documents are parsed once, right after they leave storage
- The balance reduction stays pure; logging and auditing happen here
- Every change to a transaction is audited
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional
from uuid import UUID

import structlog

from pinee.audit import AuditLogger, create_correlation_id
from pinee.balance import category_breakdown, consolidate_balance, project_totals
from pinee.config import get_settings
from pinee.export import CsvExporter, ExportError
from pinee.models.transaction import (
    CategoryBreakdown,
    ConsolidationResult,
    PeriodFilter,
    ProjectedTotals,
    SkippedRecord,
    TransactionRecord,
)
from pinee.periods import DateRangeProvider
from pinee.presentation import (
    TransactionItemView,
    format_short_date,
    format_transaction_amount,
)
from pinee.services.storage import (
    AuditStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    InMemoryTransactionStorage,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
)
from pinee.transactions import InvestmentTransfer, plan_transfer, toggle_status
from pinee.validation import RecordParseError, RecordParser


logger = structlog.get_logger(__name__)


class BalanceFlow:
    """
    Computes the home screen balances.

    Flow:
    1. Read every document of the user from storage
    2. Parse them (bad documents become SkippedRecord diagnostics)
    3. Reduce into consolidated and invested balances
    4. Log and audit the outcome

    Whether the provider's consolidated range filters the records is
    decided by apply_date_range (default from settings).
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        date_range_provider: DateRangeProvider,
        parser: Optional[RecordParser] = None,
        audit_logger: Optional[AuditLogger] = None,
        apply_date_range: Optional[bool] = None,
    ):
        if apply_date_range is None:
            apply_date_range = get_settings().app.consolidation_applies_date_range
        self._storage = storage
        self._provider = date_range_provider
        self._parser = parser or RecordParser()
        self._audit_logger = audit_logger
        self._apply_date_range = apply_date_range

    async def consolidated_balance(
        self,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ConsolidationResult:
        """
        Consolidated and invested balances for a user.

        Raises:
            StorageError: If documents cannot be read
        """
        correlation_id = correlation_id or create_correlation_id()
        date_range = (
            self._provider.get_consolidated_balance_date_range()
            if self._apply_date_range
            else None
        )

        try:
            documents = await self._storage.list_documents(user_id=user_id)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="list_documents",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        records, skipped = self._parser.parse_documents(documents)
        result = consolidate_balance(
            records,
            date_range=date_range,
            skipped=skipped,
        )

        if skipped:
            logger.warning(
                "records_skipped",
                count=len(skipped),
                reasons=sorted({item.reason for item in skipped}),
            )
        logger.info(
            "balance_consolidated",
            consolidated_balance=str(result.consolidated_balance),
            invested_balance=str(result.invested_balance),
            included=result.included_count,
            out_of_range=result.out_of_range_count,
            skipped=result.skipped_count,
            range=date_range.display_text if date_range else "all_time",
        )

        if self._audit_logger:
            await self._audit_logger.log_records_skipped(skipped, correlation_id=correlation_id)
            await self._audit_logger.log_balance_consolidated(result, correlation_id=correlation_id)

        return result

    async def projected_totals(
        self,
        user_id: Optional[str] = None,
    ) -> ProjectedTotals:
        """Projected income/expense of the currently selected period."""
        current = self._provider.get_current_date_range()
        documents = await self._storage.list_documents(
            user_id=user_id,
            date_from=current.start,
            date_to=current.end,
        )
        records, _ = self._parser.parse_documents(documents)
        return project_totals(records)


def build_item_view(record: TransactionRecord) -> TransactionItemView:
    """List row for a record, with signed pt_BR amount and short date."""
    symbol = get_settings().app.currency_symbol
    return TransactionItemView.from_record(
        record,
        format_currency=lambda amount: format_transaction_amount(
            amount,
            is_income=record.is_income,
            is_investment=record.is_investment,
            symbol=symbol,
        ),
        format_short_date=format_short_date,
    )


class TransactionFlow:
    """
    Orchestrates the transaction list screen.

    Loads the selected period, turns records into list rows and applies
    the row actions (edit, delete, toggle status, export).
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        date_range_provider: DateRangeProvider,
        parser: Optional[RecordParser] = None,
        exporter: Optional[CsvExporter] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._provider = date_range_provider
        self._parser = parser or RecordParser()
        self._exporter = exporter or CsvExporter()
        self._audit_logger = audit_logger

    async def load_transactions(
        self,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[list[TransactionRecord], list[SkippedRecord]]:
        """
        Transactions of the selected period, newest first.

        Returns:
            (records, skipped)
        """
        correlation_id = correlation_id or create_correlation_id()
        current = self._provider.get_current_date_range()

        documents = await self._storage.list_documents(
            user_id=user_id,
            date_from=current.start,
            date_to=current.end,
        )
        records, skipped = self._parser.parse_documents(documents)

        if self._audit_logger:
            await self._audit_logger.log_transactions_loaded(
                user_id=user_id,
                count=len(documents),
                date_from=current.start.isoformat(),
                date_to=current.end.isoformat(),
                correlation_id=correlation_id,
            )
            await self._audit_logger.log_records_skipped(skipped, correlation_id=correlation_id)

        return records, skipped

    async def list_rows(
        self,
        user_id: Optional[str] = None,
    ) -> list[TransactionItemView]:
        records, _ = await self.load_transactions(user_id=user_id)
        return [build_item_view(record) for record in records]

    async def save_transaction(
        self,
        record: TransactionRecord,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionRecord:
        """Save a new transaction and return it with its store ID."""
        transaction_id = await self._storage.save_transaction(record)
        saved = record.model_copy(update={"id": transaction_id})

        if self._audit_logger:
            await self._audit_logger.log_transaction_saved(
                transaction_id=transaction_id,
                title=saved.title,
                amount=str(saved.amount),
                correlation_id=correlation_id,
            )

        return saved

    async def update_transaction(
        self,
        record: TransactionRecord,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionRecord:
        """
        Replace a stored transaction (edit action).

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        await self._storage.update_transaction(record)

        if self._audit_logger:
            await self._audit_logger.log_transaction_updated(
                transaction_id=record.id,
                correlation_id=correlation_id,
            )

        return record

    async def delete_transaction(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete action. Returns False if the transaction was already gone."""
        deleted = await self._storage.delete_transaction(transaction_id)

        if deleted and self._audit_logger:
            await self._audit_logger.log_transaction_deleted(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )

        return deleted

    async def toggle_status(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionRecord:
        """
        Flip a transaction's status and store it.

        Raises:
            NotFoundError: If the transaction doesn't exist
            RecordParseError: If the stored document is unusable
            StatusToggleNotAllowedError: For transferred investments
        """
        document = await self._storage.get_transaction(transaction_id)
        if document is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        try:
            record = self._parser.parse(document)
        except RecordParseError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="record_parse_error",
                    error_message=e.message,
                    details={"document_id": transaction_id, "field": e.field, "reason": e.reason},
                    correlation_id=correlation_id,
                )
            raise

        toggled = toggle_status(record)
        await self._storage.update_transaction(toggled)

        if self._audit_logger:
            await self._audit_logger.log_status_toggled(
                transaction_id=transaction_id,
                old_status=record.status,
                new_status=toggled.status,
                correlation_id=correlation_id,
            )

        return toggled

    async def transfer_to_investment(
        self,
        source_id: str,
        amount: Decimal,
        title: str,
        category: str = "",
        on: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> InvestmentTransfer:
        """
        Move part or all of an income into a new investment.

        The investment is saved first. A full transfer then deletes the
        income, a partial one stores it with the remaining amount.

        Returns:
            The transfer, with the saved investment's ID filled in

        Raises:
            NotFoundError: If the income doesn't exist
            TransferError: If the amount is not positive or exceeds the income
        """
        correlation_id = correlation_id or create_correlation_id()

        document = await self._storage.get_transaction(source_id)
        if document is None:
            raise NotFoundError(f"Transaction not found: {source_id}")

        source = self._parser.parse(document)
        transfer = plan_transfer(source, amount, title, category=category, on=on)

        investment_id = await self._storage.save_transaction(transfer.investment)
        if transfer.remaining_income is None:
            await self._storage.delete_transaction(source_id)
        else:
            await self._storage.update_transaction(transfer.remaining_income)

        logger.info(
            "investment_transferred",
            source_id=source_id,
            investment_id=investment_id,
            amount=str(amount),
            full_transfer=transfer.is_full_transfer,
        )
        if self._audit_logger:
            await self._audit_logger.log_investment_transferred(
                source_id=source_id,
                investment_id=investment_id,
                amount=str(amount),
                full_transfer=transfer.is_full_transfer,
                correlation_id=correlation_id,
            )

        return transfer.model_copy(update={
            "investment": transfer.investment.model_copy(update={"id": investment_id}),
        })

    async def category_breakdown(
        self,
        user_id: Optional[str] = None,
    ) -> CategoryBreakdown:
        """Income and expense per category for the selected period."""
        records, _ = await self.load_transactions(user_id=user_id)
        return category_breakdown(records)

    async def export_csv(
        self,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Path:
        """
        Export the selected period to CSV.

        Raises:
            NoDataFoundError: If the period has no transactions
            ExportFileSystemError: If the file cannot be written
        """
        correlation_id = correlation_id or create_correlation_id()
        records, _ = await self.load_transactions(user_id=user_id, correlation_id=correlation_id)

        try:
            file_path = self._exporter.export(records, self._provider.get_current_date_range())
        except ExportError as e:
            if self._audit_logger:
                await self._audit_logger.log_export_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_export_completed(
                file_path=str(file_path),
                row_count=len(records),
                correlation_id=correlation_id,
            )

        return file_path


def create_app_components(
    use_storage: bool = True,
) -> tuple[BalanceFlow, TransactionFlow, DateRangeProvider, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Falls back to in-memory storage when False or when
                    Sheets is not configured.

    Returns:
        (balance_flow, transaction_flow, date_range_provider, sheets_client)
    """
    sheets_client = None
    transaction_storage: TransactionStorageInterface
    audit_storage: Optional[AuditStorageInterface] = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            transaction_storage = GoogleSheetsTransactionStorage(sheets_client)
            audit_storage = GoogleSheetsAuditStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            transaction_storage = InMemoryTransactionStorage()
    else:
        transaction_storage = InMemoryTransactionStorage()

    audit_logger = AuditLogger(audit_storage)

    provider = DateRangeProvider(
        period=PeriodFilter(get_settings().app.default_period),
    )

    balance_flow = BalanceFlow(
        storage=transaction_storage,
        date_range_provider=provider,
        audit_logger=audit_logger,
    )
    transaction_flow = TransactionFlow(
        storage=transaction_storage,
        date_range_provider=provider,
        audit_logger=audit_logger,
    )

    return balance_flow, transaction_flow, provider, sheets_client
