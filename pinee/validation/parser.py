"""
Store-Boundary Record Parser

DESIGN DECISION: Documents coming out of the store are untyped key-value
maps. They are converted to TransactionRecord in exactly one place, here.

Two kinds of problems exist:

FATAL - the record cannot take part in any calculation:
- 'date' missing or not in the configured format (strict, zero-padded)
- 'type' missing or not one of income/expense/investment
These raise RecordParseError.

DEFAULTED - the record is usable with a fallback:
- 'amount' missing or non-numeric -> 0
- 'title' and 'description' both missing -> default title
- 'createdAt' unreadable -> None

IMPORTANT: parse_documents never drops a document silently. Every fatal
problem comes back as a SkippedRecord the caller can show or log.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from pinee.config import get_settings
from pinee.models.transaction import (
    SkippedRecord,
    TransactionRecord,
    TransactionType,
)


class RecordParseError(Exception):
    """A store document could not be turned into a TransactionRecord."""

    def __init__(
        self,
        field: str,
        reason: str,
        message: str,
        document_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.field = field
        self.reason = reason
        self.message = message
        self.document_id = document_id

    def to_skipped(self) -> SkippedRecord:
        return SkippedRecord(
            document_id=self.document_id,
            field=self.field,
            reason=self.reason,
            message=self.message,
        )


class RecordParser:
    """
    Parses raw store documents into TransactionRecord objects.

    Args:
        date_format: strptime format of the 'date' field.
                     Defaults to the configured format (yyyy-MM-dd).
        default_title: Title for documents without title/description.
    """

    def __init__(
        self,
        date_format: Optional[str] = None,
        default_title: Optional[str] = None,
    ):
        if date_format is None or default_title is None:
            app_settings = get_settings().app
            date_format = date_format or app_settings.date_format
            default_title = default_title or app_settings.default_title
        self._date_format = date_format
        self._default_title = default_title

    def parse(self, document: Mapping[str, Any]) -> TransactionRecord:
        """
        Parse a single document.

        Raises:
            RecordParseError: If the date or type cannot be used
        """
        document_id = self._optional_str(document.get("id"))

        transaction_date = self._parse_date(document.get("date"), document_id)
        transaction_type = self._parse_type(document.get("type"), document_id)

        is_income = document.get("isIncome")
        if not isinstance(is_income, bool):
            is_income = transaction_type == TransactionType.INCOME

        try:
            return TransactionRecord(
                id=document_id,
                user_id=self._optional_str(document.get("userId")),
                title=self._resolve_title(document),
                description=self._optional_str(document.get("description")),
                amount=self._parse_amount(document.get("amount")),
                category=self._optional_str(document.get("category")) or "",
                date=transaction_date,
                type=transaction_type,
                status=self._raw_status(document.get("status")),
                is_income=is_income,
                created_at=self._parse_created_at(document.get("createdAt")),
                is_recurring=document.get("isRecurring") is True,
                recurring_frequency=self._optional_str(document.get("recurringFrequency")),
                recurring_end_date=self._optional_str(document.get("recurringEndDate")),
                source_transaction_id=self._optional_str(document.get("sourceTransactionId")),
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or "document"
            raise RecordParseError(
                field=field,
                reason="invalid_value",
                message=f"Invalid value for {field}: {first.get('msg')}",
                document_id=document_id,
            ) from e

    def parse_documents(
        self,
        documents: Iterable[Mapping[str, Any]],
    ) -> tuple[list[TransactionRecord], list[SkippedRecord]]:
        """
        Parse many documents, collecting failures instead of raising.

        Returns:
            (records, skipped) in input order
        """
        records = []
        skipped = []

        for document in documents:
            try:
                records.append(self.parse(document))
            except RecordParseError as e:
                skipped.append(e.to_skipped())

        return records, skipped

    def _parse_date(self, value: Any, document_id: Optional[str]) -> date:
        if not isinstance(value, str) or not value:
            raise RecordParseError(
                field="date",
                reason="missing_date",
                message="Document has no date",
                document_id=document_id,
            )

        try:
            parsed = datetime.strptime(value, self._date_format)
        except ValueError:
            parsed = None

        # strptime accepts '2024-1-5'; formatting back rejects it
        if parsed is None or parsed.strftime(self._date_format) != value:
            raise RecordParseError(
                field="date",
                reason="invalid_date",
                message=f"Date '{value}' does not match {self._date_format}",
                document_id=document_id,
            )

        return parsed.date()

    def _parse_type(self, value: Any, document_id: Optional[str]) -> TransactionType:
        try:
            return TransactionType(value)
        except ValueError:
            raise RecordParseError(
                field="type",
                reason="unknown_type",
                message=f"Unknown transaction type: {value!r}",
                document_id=document_id,
            )

    def _parse_amount(self, value: Any) -> Decimal:
        """Numeric amounts only; anything else counts as zero."""
        if isinstance(value, bool):
            return Decimal("0")
        if isinstance(value, Decimal):
            return value if value.is_finite() else Decimal("0")
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, float):
            if not math.isfinite(value):
                return Decimal("0")
            return Decimal(str(value))
        return Decimal("0")

    def _parse_created_at(self, value: Any) -> Optional[datetime]:
        if isinstance(value, datetime):
            return value
        if isinstance(value, str) and value:
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        return None

    def _resolve_title(self, document: Mapping[str, Any]) -> str:
        """First text value of title, then description. An empty title is kept."""
        for key in ("title", "description"):
            value = document.get(key)
            if isinstance(value, str):
                return value.strip()
        return self._default_title

    @staticmethod
    def _raw_status(value: Any) -> str:
        # Matched exactly against the known statuses, so kept as stored
        return value if isinstance(value, str) else ""

    @staticmethod
    def _optional_str(value: Any) -> Optional[str]:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return None
