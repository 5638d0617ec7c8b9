"""Tests for document parsing and the consolidated balance."""

import pytest
from datetime import date
from decimal import Decimal

from pinee.balance import consolidate_balance, consolidate_documents, project_totals
from pinee.models.transaction import DateRange, TransactionRecord, TransactionType
from pinee.validation import RecordParseError, RecordParser


@pytest.fixture
def parser():
    return RecordParser(date_format="%Y-%m-%d", default_title="Sem título")


def doc(**fields):
    base = {"type": "expense", "status": "paid", "amount": 10, "date": "2024-01-05"}
    base.update(fields)
    return base


class TestRecordParser:
    """Tests for RecordParser."""

    def test_parses_complete_document(self, parser):
        """Test a well-formed document."""
        record = parser.parse({
            "id": "t1",
            "userId": "u1",
            "title": "Salário",
            "amount": 3500,
            "category": "trabalho",
            "date": "2025-06-05",
            "type": "income",
            "status": "received",
            "isIncome": True,
            "createdAt": "2025-06-01T10:00:00",
        })
        assert record.id == "t1"
        assert record.amount == Decimal("3500")
        assert record.date == date(2025, 6, 5)
        assert record.type == TransactionType.INCOME
        assert record.is_income is True
        assert record.created_at.hour == 10

    def test_missing_date_raises(self, parser):
        """Test missing date is a typed parse error."""
        with pytest.raises(RecordParseError) as exc_info:
            parser.parse({"id": "x", "type": "income", "amount": 1})
        assert exc_info.value.reason == "missing_date"
        assert exc_info.value.document_id == "x"

    @pytest.mark.parametrize("value", ["05/01/2024", "2024-1-5", "2024-02-30", "hoje"])
    def test_invalid_date_raises(self, parser, value):
        """Test dates that don't match yyyy-MM-dd exactly."""
        with pytest.raises(RecordParseError) as exc_info:
            parser.parse(doc(date=value))
        assert exc_info.value.field == "date"
        assert exc_info.value.reason == "invalid_date"

    def test_unknown_type_raises(self, parser):
        """Test an unrecognized type is a typed parse error."""
        with pytest.raises(RecordParseError) as exc_info:
            parser.parse(doc(type="transfer"))
        assert exc_info.value.reason == "unknown_type"

    def test_missing_type_raises(self, parser):
        """Test a missing type is a typed parse error."""
        document = doc()
        del document["type"]
        with pytest.raises(RecordParseError) as exc_info:
            parser.parse(document)
        assert exc_info.value.field == "type"

    @pytest.mark.parametrize("value", [None, "100", True, float("nan"), float("inf")])
    def test_unusable_amount_defaults_to_zero(self, parser, value):
        """Test missing or non-numeric amounts count as zero."""
        record = parser.parse(doc(amount=value))
        assert record.amount == Decimal("0")

    def test_missing_amount_defaults_to_zero(self, parser):
        """Test a document without amount."""
        document = doc()
        del document["amount"]
        assert parser.parse(document).amount == Decimal("0")

    def test_float_amount_is_exact(self, parser):
        """Test floats are converted through their repr."""
        assert parser.parse(doc(amount=0.1)).amount == Decimal("0.1")

    def test_title_falls_back_to_description(self, parser):
        """Test title fallback chain."""
        assert parser.parse(doc(description="Padaria")).title == "Padaria"
        assert parser.parse(doc(title=None, description=None)).title == "Sem título"

    def test_empty_title_is_kept(self, parser):
        """Test an empty title does not fall through to the description."""
        assert parser.parse(doc(title="", description="Padaria")).title == ""

    def test_status_is_not_stripped(self, parser):
        """Test the status string is kept exactly as stored."""
        assert parser.parse(doc(status=" paid")).status == " paid"
        assert parser.parse(doc(status="paid ")).status == "paid "

    def test_is_income_defaults_from_type(self, parser):
        """Test isIncome falls back to type == income."""
        assert parser.parse(doc(type="income")).is_income is True
        assert parser.parse(doc(type="expense")).is_income is False
        assert parser.parse(doc(type="expense", isIncome=True)).is_income is True

    def test_parse_documents_collects_skipped(self, parser):
        """Test bad documents become diagnostics instead of errors."""
        records, skipped = parser.parse_documents([
            doc(id="ok"),
            doc(id="bad-date", date="2024/01/05"),
            doc(id="bad-type", type="gift"),
        ])
        assert [r.id for r in records] == ["ok"]
        assert [(s.document_id, s.reason) for s in skipped] == [
            ("bad-date", "invalid_date"),
            ("bad-type", "unknown_type"),
        ]


class TestConsolidateBalance:
    """Tests for the consolidated balance reduction."""

    def test_reference_example(self, parser):
        """Test income paid 100, expense paid 40, investment pending 25."""
        result = consolidate_documents([
            {"type": "income", "status": "paid", "amount": 100, "date": "2024-01-05"},
            {"type": "expense", "status": "paid", "amount": 40, "date": "2024-01-06"},
            {"type": "investment", "status": "pending", "amount": 25, "date": "2024-01-07"},
        ], parser=parser)
        assert result.consolidated_balance == Decimal("60")
        assert result.invested_balance == Decimal("25")
        assert result.included_count == 3
        assert result.skipped_count == 0

    @pytest.mark.parametrize("status", ["consolidated", "paid", "received"])
    def test_income_counts_when_received(self, parser, status):
        """Test income statuses that count."""
        result = consolidate_documents([doc(type="income", status=status, amount=50)], parser=parser)
        assert result.consolidated_balance == Decimal("50")

    @pytest.mark.parametrize("status", ["pending", "unpaid", "", "Paid"])
    def test_income_excluded_otherwise(self, parser, status):
        """Test other income statuses are excluded."""
        result = consolidate_documents([doc(type="income", status=status, amount=50)], parser=parser)
        assert result.consolidated_balance == Decimal("0")
        assert result.income_consolidated == Decimal("0")

    @pytest.mark.parametrize("status", ["unpaid", "pending", "received", ""])
    def test_expense_counts_only_when_paid(self, parser, status):
        """Test only paid expenses reduce the balance."""
        result = consolidate_documents([
            doc(type="expense", status="paid", amount=30),
            doc(type="expense", status=status, amount=1000),
        ], parser=parser)
        assert result.consolidated_balance == Decimal("-30")
        assert result.expenses_paid == Decimal("30")

    def test_padded_statuses_do_not_count(self, parser):
        """Test statuses with surrounding whitespace are not treated as paid."""
        result = consolidate_documents([
            doc(type="income", status=" paid", amount=100),
            doc(type="expense", status="paid ", amount=40),
        ], parser=parser)
        assert result.consolidated_balance == Decimal("0")
        assert result.income_consolidated == Decimal("0")
        assert result.expenses_paid == Decimal("0")

    def test_investments_count_regardless_of_status(self, parser):
        """Test every investment adds to the invested balance."""
        result = consolidate_documents([
            doc(type="investment", status="invested", amount=10),
            doc(type="investment", status="pending", amount=5),
            doc(type="investment", status="", amount=1),
        ], parser=parser)
        assert result.invested_balance == Decimal("16")
        assert result.consolidated_balance == Decimal("0")

    def test_malformed_dates_excluded_from_every_total(self, parser):
        """Test that records with a bad date contribute nothing."""
        result = consolidate_documents([
            doc(type="income", status="paid", amount=100, date="05-01-2024"),
            doc(type="investment", amount=100, date=""),
            doc(type="income", status="paid", amount=7),
        ], parser=parser)
        assert result.consolidated_balance == Decimal("7")
        assert result.invested_balance == Decimal("0")
        assert result.skipped_count == 2

    def test_missing_amount_contributes_zero(self, parser):
        """Test a paid income without amount."""
        document = doc(type="income", status="paid")
        del document["amount"]
        result = consolidate_documents([document], parser=parser)
        assert result.consolidated_balance == Decimal("0")
        assert result.included_count == 1

    def test_empty_input(self):
        """Test no records at all."""
        result = consolidate_balance([])
        assert result.consolidated_balance == Decimal("0")
        assert result.included_count == 0

    def test_no_range_means_all_time(self, parser):
        """Test every date counts when no range is given."""
        records, _ = parser.parse_documents([
            doc(type="income", amount=1, date="1999-01-01"),
            doc(type="income", amount=2, date="2090-12-31"),
        ])
        result = consolidate_balance(records)
        assert result.consolidated_balance == Decimal("3")
        assert result.date_range is None

    def test_range_filters_records(self, parser):
        """Test only records inside the range count when one is given."""
        records, _ = parser.parse_documents([
            doc(type="income", amount=1, date="2024-01-01"),
            doc(type="income", amount=2, date="2024-01-31"),
            doc(type="income", amount=4, date="2024-02-01"),
        ])
        date_range = DateRange(
            start=date(2024, 1, 1),
            end=date(2024, 1, 31),
            display_text="Janeiro 2024",
        )
        result = consolidate_balance(records, date_range=date_range)
        assert result.consolidated_balance == Decimal("3")
        assert result.included_count == 2
        assert result.out_of_range_count == 1
        assert result.date_range == date_range

    def test_result_is_independent_per_call(self, parser):
        """Test repeated calls do not accumulate."""
        documents = [doc(type="income", amount=10)]
        first = consolidate_documents(documents, parser=parser)
        second = consolidate_documents(documents, parser=parser)
        assert first.consolidated_balance == second.consolidated_balance == Decimal("10")


class TestProjectTotals:
    """Tests for project_totals."""

    def test_ignores_status_and_investments(self):
        """Test projections count everything scheduled."""
        records = [
            TransactionRecord(title="a", amount=Decimal("100"), date=date(2025, 6, 1),
                              type=TransactionType.INCOME, status="pending"),
            TransactionRecord(title="b", amount=Decimal("30"), date=date(2025, 6, 2),
                              type=TransactionType.EXPENSE, status="unpaid"),
            TransactionRecord(title="c", amount=Decimal("500"), date=date(2025, 6, 3),
                              type=TransactionType.INVESTMENT, status="invested"),
        ]
        totals = project_totals(records)
        assert totals.income == Decimal("100")
        assert totals.expense == Decimal("30")
        assert totals.balance == Decimal("70")
