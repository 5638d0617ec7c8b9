"""Tests for the per-category breakdown."""

import pytest
from datetime import date
from decimal import Decimal

from pinee.balance import calculate_percentage, category_breakdown, summarize_categories
from pinee.models.transaction import TransactionRecord, TransactionType
from pinee.presentation import format_percentage


def record(transaction_type: TransactionType, amount: str, category: str = "", status: str = "") -> TransactionRecord:
    return TransactionRecord(
        title="x",
        amount=Decimal(amount),
        category=category,
        date=date(2025, 6, 10),
        type=transaction_type,
        status=status,
    )


class TestCalculatePercentage:
    """Tests for calculate_percentage."""

    def test_share_of_total(self):
        """Test a regular share."""
        assert calculate_percentage(Decimal("25"), Decimal("200")) == Decimal("12.5")

    @pytest.mark.parametrize("total", [Decimal("0"), Decimal("-10")])
    def test_non_positive_total(self, total):
        """Test an empty or negative total gives zero."""
        assert calculate_percentage(Decimal("5"), total) == Decimal("0")


class TestSummarizeCategories:
    """Tests for summarize_categories."""

    def test_groups_and_sorts_largest_first(self):
        """Test totals per category, largest first, with shares."""
        records = [
            record(TransactionType.EXPENSE, "50", "mercado", status="paid"),
            record(TransactionType.EXPENSE, "150", "casa", status="unpaid"),
            record(TransactionType.EXPENSE, "50", "mercado"),
            record(TransactionType.INCOME, "999", "trabalho"),
        ]

        summary = summarize_categories(records, TransactionType.EXPENSE)

        assert [item.category for item in summary] == ["casa", "mercado"]
        assert [item.total for item in summary] == [Decimal("150"), Decimal("100")]
        assert summary[0].percentage == Decimal("60")
        assert summary[1].percentage == Decimal("40")

    def test_missing_category_is_outros(self):
        """Test records without a category."""
        summary = summarize_categories([record(TransactionType.INCOME, "10")], TransactionType.INCOME)
        assert summary[0].category == "Outros"
        assert summary[0].percentage == Decimal("100")

    def test_no_matching_records(self):
        """Test an empty breakdown."""
        assert summarize_categories([record(TransactionType.INCOME, "10")], TransactionType.EXPENSE) == []


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_income_and_expense_separately(self):
        """Test investments stay out of both groups."""
        breakdown = category_breakdown([
            record(TransactionType.INCOME, "300", "trabalho"),
            record(TransactionType.INCOME, "100", "extra"),
            record(TransactionType.EXPENSE, "80", "mercado"),
            record(TransactionType.INVESTMENT, "500", "tesouro"),
        ])

        assert breakdown.total_income == Decimal("400")
        assert breakdown.total_expense == Decimal("80")
        assert [item.category for item in breakdown.income] == ["trabalho", "extra"]
        assert breakdown.income[0].percentage == Decimal("75")
        assert breakdown.expense[0].percentage == Decimal("100")

    def test_format_percentage(self):
        """Test one decimal place."""
        assert format_percentage(Decimal("12.5")) == "12.5%"
        assert format_percentage(Decimal("100")) == "100.0%"
        assert format_percentage(Decimal("200") / Decimal("3")) == "66.7%"
