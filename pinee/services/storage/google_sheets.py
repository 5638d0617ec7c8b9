"""
Google Sheets Storage Implementation

A spreadsheet stands in for the mobile app's document store on the
dashboard: the user can open it, read every transaction and fix a typo by
hand. One household's transactions fit comfortably in a worksheet.

Limits worth knowing:
- every read pulls the whole worksheet and filters in Python
- there are no multi-row transactions, so writes touch one row at a time

Cells come back as strings. Rows are turned into the same raw document
shape the mobile store produces (numeric amount, boolean flags) and then
go through the normal record parser, so a hand-edited bad date is skipped
like any other malformed document.
"""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID, uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pinee.config import get_settings
from pinee.models.audit import AuditEvent
from pinee.models.transaction import TransactionRecord
from pinee.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    Document,
    DuplicateError,
    NotFoundError,
    StorageError,
    TransactionStorageInterface,
    document_sort_key,
    in_date_window,
)


SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

# Transactions worksheet header, using the store's document keys
TRANSACTION_COLUMNS = [
    "id",
    "userId",
    "title",
    "description",
    "amount",
    "category",
    "date",
    "type",
    "status",
    "isIncome",
    "createdAt",
    "isRecurring",
    "recurringFrequency",
    "recurringEndDate",
    "sourceTransactionId",
]

BOOLEAN_COLUMNS = {"isIncome", "isRecurring"}

# AuditLog worksheet header, matching AuditEvent.to_sheets_row
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

# Sheets API quota errors are transient; three tries with backoff
sheets_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Authenticated handle on the PINEE spreadsheet.

    Connection and spreadsheet lookup are lazy and cached, so creating a
    client never touches the network.
    """

    def __init__(self):
        self._settings = get_settings().google_sheets
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @sheets_retry
    def connect(self) -> gspread.Client:
        if self._client is not None:
            return self._client

        path = self._settings.credentials_path
        try:
            credentials = Credentials.from_service_account_file(path, scopes=SCOPES)
            self._client = gspread.authorize(credentials)
        except FileNotFoundError:
            raise ConnectionError(f"Service account file missing: {path}")
        except Exception as e:
            raise ConnectionError(f"Could not authorize with Google Sheets: {e}")
        return self._client

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            spreadsheet_id = self._settings.spreadsheet_id
            try:
                self._spreadsheet = self.connect().open_by_key(spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(f"No spreadsheet with ID {spreadsheet_id}")
        return self._spreadsheet

    def _worksheet(self, title: str, header: list[str], rows: int) -> gspread.Worksheet:
        """Open a worksheet, creating it with its header row on first use."""
        try:
            return self.spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = self.spreadsheet.add_worksheet(title=title, rows=rows, cols=len(header))
            sheet.append_row(header)
            return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self._worksheet(self._settings.transactions_sheet_name, TRANSACTION_COLUMNS, rows=1000)

    def get_audit_sheet(self) -> gspread.Worksheet:
        # The audit trail grows much faster than the transaction list
        return self._worksheet(self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000)


def record_to_row(record: TransactionRecord, record_id: str) -> list[str]:
    """Worksheet cells for a record, in TRANSACTION_COLUMNS order."""
    document = record.to_document()
    document["id"] = record_id
    return ["" if document.get(key) is None else str(document[key]) for key in TRANSACTION_COLUMNS]


def row_to_document(row: list[str]) -> Document:
    """
    Raw document for a worksheet row.

    Blank cells are left out. Status cells keep their whitespace. An
    amount that doesn't read as a number stays text, so the parser
    counts it as zero.
    """
    document: dict[str, Any] = {}
    for key, raw in zip(TRANSACTION_COLUMNS, row):
        cell = raw.strip()
        if not cell:
            continue
        if key == "status":
            document[key] = raw
        elif key == "amount":
            try:
                document[key] = float(cell.replace(",", "."))
            except ValueError:
                document[key] = cell
        elif key in BOOLEAN_COLUMNS:
            document[key] = cell.lower() == "true"
        else:
            document[key] = cell
    return document


def _numbered_rows(sheet: gspread.Worksheet) -> list[tuple[int, list[str]]]:
    """(worksheet row number, cells) for every row with an ID; row 1 is the header."""
    values = sheet.get_all_values()
    return [(number, cells) for number, cells in enumerate(values[1:], start=2) if cells and cells[0]]


class GoogleSheetsTransactionStorage(TransactionStorageInterface):
    """Transactions kept one per worksheet row."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def list_documents(
        self,
        user_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Document]:
        try:
            sheet = self._client.get_transactions_sheet()
            documents = [row_to_document(cells) for _, cells in _numbered_rows(sheet)]
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

        documents = [
            document for document in documents
            if (user_id is None or document.get("userId") == user_id)
            and in_date_window(document, date_from, date_to)
        ]
        documents.sort(key=document_sort_key, reverse=True)
        return documents

    async def get_transaction(self, transaction_id: str) -> Optional[Document]:
        try:
            rows = _numbered_rows(self._client.get_transactions_sheet())
        except Exception as e:
            raise StorageError(f"Failed to read transaction {transaction_id}: {e}")

        for _, cells in rows:
            if cells[0] == transaction_id:
                return row_to_document(cells)
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(DuplicateError),
        reraise=True,
    )
    async def save_transaction(self, record: TransactionRecord) -> str:
        record_id = record.id or uuid4().hex
        try:
            sheet = self._client.get_transactions_sheet()
            existing = {cells[0] for _, cells in _numbered_rows(sheet)}
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

        if record_id in existing:
            raise DuplicateError(f"Transaction already exists: {record_id}")

        if record.created_at is None:
            record = record.model_copy(update={"created_at": datetime.utcnow()})

        try:
            sheet.append_row(record_to_row(record, record_id), value_input_option="RAW")
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")
        return record_id

    async def update_transaction(self, record: TransactionRecord) -> bool:
        if record.id is None:
            raise NotFoundError("Cannot update a transaction without an ID")

        try:
            sheet = self._client.get_transactions_sheet()
            rows = _numbered_rows(sheet)
        except Exception as e:
            raise StorageError(f"Failed to update transaction: {e}")

        for number, cells in rows:
            if cells[0] != record.id:
                continue

            new_cells = record_to_row(record, record.id)
            created = TRANSACTION_COLUMNS.index("createdAt")
            if not new_cells[created] and created < len(cells):
                new_cells[created] = cells[created]

            try:
                for column, value in enumerate(new_cells, start=1):
                    sheet.update_cell(number, column, value)
            except Exception as e:
                raise StorageError(f"Failed to update transaction: {e}")
            return True

        raise NotFoundError(f"Transaction not found: {record.id}")

    async def delete_transaction(self, transaction_id: str) -> bool:
        try:
            sheet = self._client.get_transactions_sheet()
            for number, cells in _numbered_rows(sheet):
                if cells[0] == transaction_id:
                    sheet.delete_rows(number)
                    return True
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")
        return False


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """Audit trail appended to its own worksheet."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _events(self) -> list[AuditEvent]:
        events = []
        for row in self._client.get_audit_sheet().get_all_values()[1:]:
            if not row or not row[0]:
                continue
            try:
                events.append(AuditEvent.from_sheets_row(row))
            except ValueError:
                continue  # hand-edited row
        return events

    @sheets_retry
    async def append_event(self, event: AuditEvent) -> bool:
        try:
            self._client.get_audit_sheet().append_row(event.to_sheets_row(), value_input_option="RAW")
        except Exception as e:
            raise StorageError(f"Failed to write audit event: {e}")
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        try:
            events = [e for e in self._events() if e.correlation_id == correlation_id]
        except Exception as e:
            raise StorageError(f"Failed to read audit events: {e}")
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        try:
            events = self._events()
        except Exception as e:
            raise StorageError(f"Failed to read audit events: {e}")
        return sorted(events, key=lambda e: e.timestamp, reverse=True)[:limit]
