"""
Integration tests for the balance and transaction flows.

All flows run against in-memory storage.
"""

import asyncio
import pytest
from datetime import date
from decimal import Decimal

from pinee.audit import AuditLogger
from pinee.export import CsvExporter, NoDataFoundError
from pinee.models.audit import AuditEventType
from pinee.models.transaction import PeriodFilter, TransactionRecord, TransactionType
from pinee.orchestrator import (
    BalanceFlow,
    TransactionFlow,
    build_item_view,
    create_app_components,
)
from pinee.periods import DateRangeProvider
from pinee.presentation import RowColor
from pinee.services.storage import (
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    NotFoundError,
    StorageError,
)
from pinee.transactions import StatusToggleNotAllowedError, TransferError
from pinee.validation import RecordParser


DOCUMENTS = [
    {"id": "i1", "userId": "u1", "type": "income", "status": "received", "amount": 1000, "date": "2025-05-05"},
    {"id": "i2", "userId": "u1", "type": "income", "status": "pending", "amount": 300, "date": "2025-06-10"},
    {"id": "e1", "userId": "u1", "type": "expense", "status": "paid", "amount": 200, "date": "2025-06-12"},
    {"id": "e2", "userId": "u1", "type": "expense", "status": "unpaid", "amount": 50, "date": "2025-06-15"},
    {"id": "v1", "userId": "u1", "type": "investment", "status": "invested", "amount": 400, "date": "2025-06-20"},
    {"id": "f1", "userId": "u1", "type": "income", "status": "received", "amount": 9999, "date": "2025-07-02"},
    {"id": "bad", "userId": "u1", "type": "income", "status": "received", "amount": 5, "date": "10/06/2025"},
]


@pytest.fixture
def storage():
    return InMemoryTransactionStorage(DOCUMENTS)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def provider():
    return DateRangeProvider(selected_date=date(2025, 6, 24))


@pytest.fixture
def parser():
    return RecordParser(date_format="%Y-%m-%d", default_title="Sem título")


@pytest.fixture
def transaction_flow(storage, provider, parser, audit_logger, tmp_path):
    return TransactionFlow(
        storage=storage,
        date_range_provider=provider,
        parser=parser,
        exporter=CsvExporter(tmp_path),
        audit_logger=audit_logger,
    )


def event_types(audit_storage):
    events = asyncio.run(audit_storage.get_recent_events())
    return {event.event_type for event in events}


class FailingStorage(InMemoryTransactionStorage):
    async def list_documents(self, user_id=None, date_from=None, date_to=None):
        raise StorageError("sheet unavailable")


class TestBalanceFlow:
    """Tests for BalanceFlow."""

    def test_all_time_balance(self, storage, provider, parser, audit_logger, audit_storage):
        """Test every parseable record counts when the range is not applied."""
        flow = BalanceFlow(storage, provider, parser=parser, audit_logger=audit_logger, apply_date_range=False)

        result = asyncio.run(flow.consolidated_balance(user_id="u1"))

        assert result.consolidated_balance == Decimal("10799")
        assert result.invested_balance == Decimal("400")
        assert result.skipped_count == 1
        assert result.skipped[0].document_id == "bad"
        assert result.date_range is None

        types = event_types(audit_storage)
        assert AuditEventType.BALANCE_CONSOLIDATED in types
        assert AuditEventType.RECORDS_SKIPPED in types

    def test_balance_up_to_current_period(self, storage, provider, parser):
        """Test the consolidated range excludes records after the period."""
        flow = BalanceFlow(storage, provider, parser=parser, apply_date_range=True)

        result = asyncio.run(flow.consolidated_balance(user_id="u1"))

        assert result.consolidated_balance == Decimal("800")
        assert result.out_of_range_count == 1
        assert result.date_range.end == date(2025, 6, 30)

    def test_all_time_balance_with_open_custom_period(self, storage, parser):
        """Test a custom period without dates does not block the all-time balance."""
        provider = DateRangeProvider(period=PeriodFilter.CUSTOM)
        flow = BalanceFlow(storage, provider, parser=parser, apply_date_range=False)

        result = asyncio.run(flow.consolidated_balance(user_id="u1"))

        assert result.consolidated_balance == Decimal("10799")
        assert result.date_range is None

    def test_projected_totals_for_current_period(self, storage, provider, parser):
        """Test projections cover only the selected month."""
        flow = BalanceFlow(storage, provider, parser=parser, apply_date_range=False)

        totals = asyncio.run(flow.projected_totals(user_id="u1"))

        assert totals.income == Decimal("300")
        assert totals.expense == Decimal("250")
        assert totals.balance == Decimal("50")

    def test_storage_error_is_audited_and_raised(self, provider, parser, audit_logger, audit_storage):
        """Test storage failures surface to the caller."""
        flow = BalanceFlow(FailingStorage(), provider, parser=parser, audit_logger=audit_logger, apply_date_range=False)

        with pytest.raises(StorageError):
            asyncio.run(flow.consolidated_balance())

        assert AuditEventType.STORAGE_ERROR in event_types(audit_storage)


class TestTransactionFlow:
    """Tests for TransactionFlow."""

    def test_load_transactions_for_period(self, transaction_flow, audit_storage):
        """Test only the selected month is loaded, newest first."""
        records, skipped = asyncio.run(transaction_flow.load_transactions(user_id="u1"))

        assert [r.id for r in records] == ["v1", "e2", "e1", "i2"]
        assert skipped == []
        assert AuditEventType.TRANSACTIONS_LOADED in event_types(audit_storage)

    def test_list_rows(self, transaction_flow):
        """Test rows carry formatted amounts and colors."""
        rows = asyncio.run(transaction_flow.list_rows(user_id="u1"))

        assert rows[0].amount == "R$ 400,00"
        assert rows[0].style.circle_color == RowColor.BLUE
        assert rows[1].amount == "-R$ 50,00"
        assert rows[1].date == "15 Jun"
        assert rows[3].amount == "+R$ 300,00"

    def test_save_and_delete(self, transaction_flow, storage, audit_storage):
        """Test saving then deleting a transaction."""
        record = TransactionRecord(
            title="Farmácia",
            amount=Decimal("35.90"),
            date=date(2025, 6, 25),
            type=TransactionType.EXPENSE,
            status="unpaid",
            user_id="u1",
        )

        saved = asyncio.run(transaction_flow.save_transaction(record))
        assert saved.id is not None
        assert asyncio.run(storage.get_transaction(saved.id))["title"] == "Farmácia"

        assert asyncio.run(transaction_flow.delete_transaction(saved.id)) is True
        assert asyncio.run(transaction_flow.delete_transaction(saved.id)) is False

        types = event_types(audit_storage)
        assert AuditEventType.TRANSACTION_SAVED in types
        assert AuditEventType.TRANSACTION_DELETED in types

    def test_update_missing_transaction(self, transaction_flow):
        """Test editing a transaction that no longer exists."""
        record = TransactionRecord(
            id="gone",
            title="x",
            date=date(2025, 6, 1),
            type=TransactionType.EXPENSE,
        )
        with pytest.raises(NotFoundError):
            asyncio.run(transaction_flow.update_transaction(record))

    def test_toggle_status(self, transaction_flow, storage, audit_storage):
        """Test toggling an unpaid expense."""
        toggled = asyncio.run(transaction_flow.toggle_status("e2"))

        assert toggled.status == "paid"
        assert asyncio.run(storage.get_transaction("e2"))["status"] == "paid"
        assert AuditEventType.STATUS_TOGGLED in event_types(audit_storage)

    def test_toggle_missing_transaction(self, transaction_flow):
        """Test toggling an unknown id."""
        with pytest.raises(NotFoundError):
            asyncio.run(transaction_flow.toggle_status("nope"))

    def test_toggle_transferred_investment(self, transaction_flow, storage):
        """Test investments created from an income stay locked."""
        storage.add_document({
            "id": "v2",
            "type": "investment",
            "status": "invested",
            "amount": 10,
            "date": "2025-06-21",
            "sourceTransactionId": "i1",
        })
        with pytest.raises(StatusToggleNotAllowedError):
            asyncio.run(transaction_flow.toggle_status("v2"))

    def test_partial_transfer_to_investment(self, transaction_flow, storage, audit_storage):
        """Test part of an income becomes a linked investment."""
        transfer = asyncio.run(transaction_flow.transfer_to_investment(
            "i2", Decimal("100"), "CDB", category="renda_fixa", on=date(2025, 6, 11),
        ))

        investment = asyncio.run(storage.get_transaction(transfer.investment.id))
        assert investment["type"] == "investment"
        assert investment["status"] == "invested"
        assert investment["sourceTransactionId"] == "i2"
        assert asyncio.run(storage.get_transaction("i2"))["amount"] == 200.0
        assert AuditEventType.INVESTMENT_TRANSFERRED in event_types(audit_storage)

    def test_full_transfer_removes_income(self, transaction_flow, storage):
        """Test investing the whole income deletes it."""
        transfer = asyncio.run(transaction_flow.transfer_to_investment("i2", Decimal("300"), "CDB"))

        assert transfer.is_full_transfer is True
        assert asyncio.run(storage.get_transaction("i2")) is None
        assert asyncio.run(storage.get_transaction(transfer.investment.id)) is not None

    def test_transfer_above_income(self, transaction_flow, storage):
        """Test an amount above the income changes nothing."""
        with pytest.raises(TransferError):
            asyncio.run(transaction_flow.transfer_to_investment("i2", Decimal("301"), "CDB"))
        assert asyncio.run(storage.get_transaction("i2"))["amount"] == 300

    def test_transfer_missing_income(self, transaction_flow):
        """Test transferring from an unknown id."""
        with pytest.raises(NotFoundError):
            asyncio.run(transaction_flow.transfer_to_investment("nope", Decimal("1"), "CDB"))

    def test_category_breakdown(self, transaction_flow):
        """Test the selected month grouped by category."""
        breakdown = asyncio.run(transaction_flow.category_breakdown(user_id="u1"))

        assert breakdown.total_income == Decimal("300")
        assert breakdown.total_expense == Decimal("250")
        assert breakdown.expense[0].category == "Outros"
        assert breakdown.expense[0].percentage == Decimal("100")

    def test_export_csv(self, transaction_flow, tmp_path, audit_storage):
        """Test exporting the selected month."""
        file_path = asyncio.run(transaction_flow.export_csv(user_id="u1"))

        assert file_path.parent == tmp_path
        assert len(file_path.read_text(encoding="utf-8").splitlines()) == 5
        assert AuditEventType.EXPORT_COMPLETED in event_types(audit_storage)

    def test_export_empty_period(self, transaction_flow, provider, audit_storage):
        """Test exporting a month without transactions."""
        provider.update_selected_date(date(2020, 1, 1))
        with pytest.raises(NoDataFoundError):
            asyncio.run(transaction_flow.export_csv(user_id="u1"))
        assert AuditEventType.EXPORT_FAILED in event_types(audit_storage)


class TestAppComponents:
    """Tests for create_app_components."""

    def test_in_memory_components(self):
        """Test the factory without external storage."""
        balance_flow, transaction_flow, provider, sheets_client = create_app_components(use_storage=False)

        assert isinstance(balance_flow, BalanceFlow)
        assert isinstance(transaction_flow, TransactionFlow)
        assert sheets_client is None
        assert provider.get_current_date_range() is not None

    def test_build_item_view(self):
        """Test the default row builder."""
        record = TransactionRecord(
            title="Bônus",
            amount=Decimal("1234.5"),
            date=date(2025, 6, 5),
            type=TransactionType.INCOME,
            is_income=True,
        )
        view = build_item_view(record)
        assert view.amount == "+R$ 1.234,50"
        assert view.style.circle_color == RowColor.GREEN
