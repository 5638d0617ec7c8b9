"""
Consolidated Balance

DESIGN DECISION: The reduction is a PURE function.
It takes parsed records (and optionally a date range) and returns a
ConsolidationResult. It never touches storage, settings or shared state.

Rules:
- income counts only when money was actually received
  (status consolidated, paid or received)
- expense counts only when paid
- investment always counts toward the invested balance

consolidated_balance = income_consolidated - expenses_paid
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional

from pinee.models.transaction import (
    CONSOLIDATED_INCOME_STATUSES,
    ConsolidationResult,
    DateRange,
    ProjectedTotals,
    SkippedRecord,
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)
from pinee.validation import RecordParser


def consolidate_balance(
    records: Iterable[TransactionRecord],
    date_range: Optional[DateRange] = None,
    skipped: Optional[list[SkippedRecord]] = None,
) -> ConsolidationResult:
    """
    Reduce records into the consolidated and invested balances.

    Args:
        records: Parsed transaction records
        date_range: When given, only records dated inside it (inclusive)
                    count. When None, every record counts (all-time).
        skipped: Parse diagnostics to carry into the result

    Returns:
        ConsolidationResult with the totals and counts
    """
    income_consolidated = Decimal("0")
    expenses_paid = Decimal("0")
    invested_balance = Decimal("0")
    included = 0
    out_of_range = 0

    for record in records:
        if date_range is not None and not date_range.contains(record.date):
            out_of_range += 1
            continue

        included += 1

        if record.type == TransactionType.INCOME:
            if record.status in CONSOLIDATED_INCOME_STATUSES:
                income_consolidated += record.amount
        elif record.type == TransactionType.EXPENSE:
            if record.status == TransactionStatus.PAID.value:
                expenses_paid += record.amount
        elif record.type == TransactionType.INVESTMENT:
            invested_balance += record.amount

    return ConsolidationResult(
        consolidated_balance=income_consolidated - expenses_paid,
        invested_balance=invested_balance,
        income_consolidated=income_consolidated,
        expenses_paid=expenses_paid,
        included_count=included,
        out_of_range_count=out_of_range,
        skipped=list(skipped or []),
        date_range=date_range,
    )


def consolidate_documents(
    documents: Iterable[Mapping[str, Any]],
    date_range: Optional[DateRange] = None,
    parser: Optional[RecordParser] = None,
) -> ConsolidationResult:
    """
    Parse raw store documents and consolidate them.

    Documents that fail to parse are reported in result.skipped.
    """
    parser = parser or RecordParser()
    records, skipped = parser.parse_documents(documents)
    return consolidate_balance(records, date_range=date_range, skipped=skipped)


def project_totals(records: Iterable[TransactionRecord]) -> ProjectedTotals:
    """
    Projected income and expense for a loaded period.

    Unlike the consolidated balance, status is ignored: everything that
    is scheduled counts. Investments are left out.
    """
    income = Decimal("0")
    expense = Decimal("0")

    for record in records:
        if record.type == TransactionType.INCOME:
            income += record.amount
        elif record.type == TransactionType.EXPENSE:
            expense += record.amount

    return ProjectedTotals(
        income=income,
        expense=expense,
        balance=income - expense,
    )
