"""
Core Data Models for PINEE

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Be immutable snapshots of what the document store holds
3. Be serializable back to the store's document shape
4. Carry diagnostics for anything that could not be used

DESIGN DECISION: Raw documents are untyped key-value maps. They are parsed
into TransactionRecord exactly once (see pinee.validation) and everything
downstream works on the typed record.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Kinds of transaction the app records."""
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"


class TransactionStatus(str, Enum):
    """
    Known transaction statuses.

    Records keep their status as a plain string; these are the values the
    balance rules and the status toggle understand.
    """
    CONSOLIDATED = "consolidated"
    PAID = "paid"
    RECEIVED = "received"
    UNPAID = "unpaid"
    PENDING = "pending"
    INVESTED = "invested"


class PeriodFilter(str, Enum):
    """Period granularity selectable in the app."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"
    ALL_TIME = "all_time"


# Income statuses that count as money actually in hand
CONSOLIDATED_INCOME_STATUSES = frozenset({
    TransactionStatus.CONSOLIDATED.value,
    TransactionStatus.PAID.value,
    TransactionStatus.RECEIVED.value,
})


# =============================================================================
# TRANSACTION RECORD
# =============================================================================

class TransactionRecord(BaseModel):
    """
    A single transaction, parsed from a store document.

    Immutable: creation and deletion happen in the store, never here.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Document ID in the store"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="Owner of the transaction"
    )
    title: str = Field(
        ...,
        description="Display title (falls back to description or a default)"
    )
    description: Optional[str] = None
    amount: Decimal = Field(
        default=Decimal("0"),
        description="Transaction amount in BRL"
    )
    category: str = Field(
        default="",
        description="Category identifier"
    )
    date: dt.date = Field(
        ...,
        description="Transaction date"
    )
    type: TransactionType
    # Compared exactly, so never stripped
    status: Annotated[str, StringConstraints(strip_whitespace=False)] = Field(
        default="",
        description="Status string (see TransactionStatus for known values)"
    )
    is_income: bool = Field(
        default=False,
        description="Stored income flag, drives list row colors"
    )
    created_at: Optional[dt.datetime] = None

    # Recurrence
    is_recurring: bool = False
    recurring_frequency: Optional[str] = None
    recurring_end_date: Optional[str] = None

    # Investments transferred from an income keep a link to it
    source_transaction_id: Optional[str] = None

    @property
    def is_investment(self) -> bool:
        return self.type == TransactionType.INVESTMENT

    def to_document(self) -> dict[str, Any]:
        """Convert back to the document shape used by the store."""
        document: dict[str, Any] = {
            "userId": self.user_id,
            "title": self.title,
            "description": self.description or "",
            "amount": float(self.amount),
            "category": self.category,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "status": self.status,
            "isIncome": self.is_income,
            "isRecurring": self.is_recurring,
            "recurringFrequency": self.recurring_frequency or "",
            "recurringEndDate": self.recurring_end_date or "",
            "sourceTransactionId": self.source_transaction_id,
        }
        if self.id is not None:
            document["id"] = self.id
        if self.created_at is not None:
            document["createdAt"] = self.created_at.isoformat()
        return document


# =============================================================================
# DATE RANGE
# =============================================================================

class DateRange(BaseModel):
    """A closed date interval with a label for display."""
    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date
    display_text: str

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Date range end cannot be before start")
        return self

    def contains(self, day: dt.date) -> bool:
        """Inclusive on both ends."""
        return self.start <= day <= self.end


# =============================================================================
# CONSOLIDATION RESULT
# =============================================================================

class SkippedRecord(BaseModel):
    """A document that was left out of a reduction, and why."""

    document_id: Optional[str] = Field(
        default=None,
        description="Store ID of the skipped document, when known"
    )
    field: str = Field(
        ...,
        description="Field that could not be used"
    )
    reason: str = Field(
        ...,
        description="Machine-readable reason (e.g. 'invalid_date', 'unknown_type')"
    )
    message: str = Field(
        ...,
        description="Human-readable description"
    )


class ConsolidationResult(BaseModel):
    """
    Result of the consolidated balance reduction.

    consolidated_balance = income_consolidated - expenses_paid
    """

    consolidated_balance: Decimal = Decimal("0")
    invested_balance: Decimal = Decimal("0")
    income_consolidated: Decimal = Decimal("0")
    expenses_paid: Decimal = Decimal("0")

    included_count: int = Field(
        default=0,
        ge=0,
        description="Records that passed parsing and range checks"
    )
    out_of_range_count: int = Field(
        default=0,
        ge=0,
        description="Parseable records excluded by the date range"
    )
    skipped: list[SkippedRecord] = Field(
        default_factory=list,
        description="Documents that could not be parsed"
    )
    date_range: Optional[DateRange] = Field(
        default=None,
        description="Range applied as a filter, None for all-time"
    )

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


class ProjectedTotals(BaseModel):
    """Income/expense totals of a loaded period, regardless of status."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class CategoryTotal(BaseModel):
    """Amount of one category and its share of the group total."""

    category: str
    total: Decimal = Decimal("0")
    percentage: Decimal = Field(
        default=Decimal("0"),
        description="Share of the income or expense total, 0-100"
    )


class CategoryBreakdown(BaseModel):
    """Per-category income and expense of a loaded period."""

    income: list[CategoryTotal] = Field(default_factory=list)
    expense: list[CategoryTotal] = Field(default_factory=list)
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
