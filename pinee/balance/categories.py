"""
Category Breakdown

Pure reduction of a loaded period into per-category totals for income and
for expenses, each with its share of the group total. Status is ignored,
like the period projections. Records without a category go to "Outros".
"""

from collections.abc import Iterable
from decimal import Decimal

from pinee.models.transaction import (
    CategoryBreakdown,
    CategoryTotal,
    TransactionRecord,
    TransactionType,
)


UNCATEGORIZED = "Outros"


def calculate_percentage(value: Decimal, total: Decimal) -> Decimal:
    """Share of value in total, 0-100. Zero when the total is not positive."""
    if total <= 0:
        return Decimal("0")
    return value / total * 100


def summarize_categories(
    records: Iterable[TransactionRecord],
    transaction_type: TransactionType,
) -> list[CategoryTotal]:
    """
    Totals per category for one transaction type, largest first.

    Ties keep the order in which categories first appear.
    """
    totals: dict[str, Decimal] = {}
    for record in records:
        if record.type != transaction_type:
            continue
        category = record.category or UNCATEGORIZED
        totals[category] = totals.get(category, Decimal("0")) + record.amount

    grand_total = sum(totals.values(), Decimal("0"))
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    return [
        CategoryTotal(
            category=category,
            total=total,
            percentage=calculate_percentage(total, grand_total),
        )
        for category, total in ordered
    ]


def category_breakdown(records: Iterable[TransactionRecord]) -> CategoryBreakdown:
    """Income and expense breakdowns of a loaded period."""
    records = list(records)
    income = summarize_categories(records, TransactionType.INCOME)
    expense = summarize_categories(records, TransactionType.EXPENSE)
    return CategoryBreakdown(
        income=income,
        expense=expense,
        total_income=sum((item.total for item in income), Decimal("0")),
        total_expense=sum((item.total for item in expense), Decimal("0")),
    )
