"""Tests for list row presentation: formatting, row style and swipe."""

import pytest
from datetime import date
from decimal import Decimal

from pinee.models.transaction import TransactionRecord, TransactionType
from pinee.presentation import (
    RowColor,
    RowIcon,
    SwipeableRow,
    SwipeState,
    TransactionItemView,
    format_currency,
    format_month_year,
    format_short_date,
    format_transaction_amount,
    transaction_item_style,
)


class TestFormatting:
    """Tests for pt_BR formatting helpers."""

    @pytest.mark.parametrize("value, expected", [
        (Decimal("1234.56"), "R$ 1.234,56"),
        (Decimal("0"), "R$ 0,00"),
        (1000000, "R$ 1.000.000,00"),
        (Decimal("-45.5"), "-R$ 45,50"),
        (float("nan"), "R$ 0,00"),
    ])
    def test_format_currency(self, value, expected):
        """Test BRL currency formatting."""
        assert format_currency(value) == expected

    def test_format_transaction_amount_signs(self):
        """Test signed amounts for list rows."""
        assert format_transaction_amount(Decimal("10"), is_income=True, is_investment=False) == "+R$ 10,00"
        assert format_transaction_amount(Decimal("10"), is_income=False, is_investment=False) == "-R$ 10,00"
        assert format_transaction_amount(Decimal("10"), is_income=False, is_investment=True) == "R$ 10,00"

    def test_format_short_date(self):
        """Test 'dd Mmm' dates."""
        assert format_short_date("2025-06-24") == "24 Jun"
        assert format_short_date("2025-02-03") == "03 Fev"

    @pytest.mark.parametrize("value", ["24/06/2025", "2025-6-24", "", "amanhã"])
    def test_format_short_date_unparseable_unchanged(self, value):
        """Test unparseable dates are shown as-is."""
        assert format_short_date(value) == value

    def test_format_month_year(self):
        """Test Portuguese month names."""
        assert format_month_year(date(2025, 3, 1)) == "Março 2025"


class TestTransactionItemStyle:
    """Tests for transaction_item_style."""

    @pytest.mark.parametrize("transaction_type, is_income", [
        ("investment", False),
        ("investment", True),
    ])
    def test_investment_is_blue(self, transaction_type, is_income):
        """Test investments win over the income flag."""
        style = transaction_item_style(transaction_type, is_income)
        assert style.circle_color == RowColor.BLUE
        assert style.amount_color == RowColor.BLUE
        assert style.icon_name == RowIcon.TRENDING_UP

    def test_income_is_green(self):
        """Test income rows."""
        style = transaction_item_style("income", True)
        assert style.circle_color == RowColor.GREEN
        assert style.icon_name == RowIcon.CHEVRON_UP

    @pytest.mark.parametrize("transaction_type", ["expense", "income", None])
    def test_otherwise_red(self, transaction_type):
        """Test rows without the income flag, including a missing type."""
        style = transaction_item_style(transaction_type, False)
        assert style.circle_color == RowColor.RED
        assert style.amount_color == RowColor.RED
        assert style.icon_name == RowIcon.CHEVRON_DOWN

    def test_item_view_from_record(self):
        """Test building a row with injected formatters."""
        record = TransactionRecord(
            title="Salário",
            category="trabalho",
            amount=Decimal("3500"),
            date=date(2025, 6, 5),
            type=TransactionType.INCOME,
            status="received",
            is_income=True,
        )
        view = TransactionItemView.from_record(
            record,
            format_currency=lambda amount: format_transaction_amount(amount, True, False),
            format_short_date=format_short_date,
        )
        assert view.title == "Salário"
        assert view.amount == "+R$ 3.500,00"
        assert view.date == "05 Jun"
        assert view.transaction_type == "income"
        assert view.style.circle_color == RowColor.GREEN


class TestSwipeableRow:
    """Tests for the swipe row state machine."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def row(self, calls):
        return SwipeableRow(
            on_edit=lambda: calls.append("edit"),
            on_delete=lambda: calls.append("delete"),
            threshold=50,
            reveal_width=120,
        )

    def test_starts_closed(self, row):
        """Test initial state."""
        assert row.state == SwipeState.CLOSED
        assert row.offset == 0
        assert row.is_swiped is False

    def test_release_past_threshold_opens(self, row):
        """Test a -60 release snaps open to -120."""
        row.drag_changed(-60)
        assert row.offset == -60
        row.drag_ended(-60)
        assert row.state == SwipeState.OPEN
        assert row.offset == -120

    def test_release_short_of_threshold_closes(self, row):
        """Test a -30 release snaps back to 0."""
        row.drag_changed(-30)
        row.drag_ended(-30)
        assert row.state == SwipeState.CLOSED
        assert row.offset == 0

    def test_exact_threshold_does_not_open(self, row):
        """Test the threshold must be exceeded."""
        row.drag_ended(-50)
        assert row.state == SwipeState.CLOSED

    def test_rightward_drag_ignored(self, row):
        """Test the offset never goes above 0."""
        row.drag_changed(40)
        assert row.offset == 0

    def test_tap_closes_open_row(self, row):
        """Test tapping an open row."""
        row.drag_ended(-80)
        row.tap()
        assert row.state == SwipeState.CLOSED
        assert row.offset == 0

    def test_tap_on_closed_row_does_nothing(self, row):
        """Test tapping a closed row."""
        row.tap()
        assert row.state == SwipeState.CLOSED

    def test_buttons_call_callbacks_without_changing_state(self, row, calls):
        """Test edit/delete only invoke the callbacks."""
        row.drag_ended(-80)
        row.edit()
        row.delete()
        assert calls == ["edit", "delete"]
        assert row.state == SwipeState.OPEN

    def test_defaults_from_settings(self):
        """Test default geometry."""
        row = SwipeableRow(on_edit=lambda: None, on_delete=lambda: None)
        assert row.threshold == 50
        assert row.reveal_width == 120
