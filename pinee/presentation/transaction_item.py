"""
Transaction List Item

Maps a transaction to what its list row shows: circle color, icon,
amount color and the formatted texts.

| condition            | color | icon                      |
|----------------------|-------|---------------------------|
| type == investment   | blue  | chart.line.uptrend.xyaxis |
| is_income            | green | chevron.up                |
| otherwise            | red   | chevron.down              |
"""

from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from pinee.models.transaction import TransactionRecord, TransactionType


class RowColor(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    RED = "red"


class RowIcon(str, Enum):
    TRENDING_UP = "chart.line.uptrend.xyaxis"
    CHEVRON_UP = "chevron.up"
    CHEVRON_DOWN = "chevron.down"


class TransactionItemStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    circle_color: RowColor
    icon_name: RowIcon
    amount_color: RowColor


def transaction_item_style(
    transaction_type: Optional[str],
    is_income: bool,
) -> TransactionItemStyle:
    """Pick colors and icon for a row. A missing type is shown as an expense."""
    kind = transaction_type or TransactionType.EXPENSE.value

    if kind == TransactionType.INVESTMENT.value:
        color, icon = RowColor.BLUE, RowIcon.TRENDING_UP
    elif is_income:
        color, icon = RowColor.GREEN, RowIcon.CHEVRON_UP
    else:
        color, icon = RowColor.RED, RowIcon.CHEVRON_DOWN

    return TransactionItemStyle(circle_color=color, icon_name=icon, amount_color=color)


class TransactionItemView(BaseModel):
    """Everything a list row displays."""
    model_config = ConfigDict(frozen=True)

    title: str
    category: str
    amount: str
    date: str
    is_income: bool
    transaction_type: str
    style: TransactionItemStyle

    @classmethod
    def from_record(
        cls,
        record: TransactionRecord,
        format_currency: Callable[[Decimal], str],
        format_short_date: Callable[[str], str],
    ) -> "TransactionItemView":
        """
        Build a row from a record.

        Formatting is injected so screens decide how amounts and dates look.
        """
        transaction_type = record.type.value
        return cls(
            title=record.title or record.description or "-",
            category=record.category,
            amount=format_currency(record.amount),
            date=format_short_date(record.date.isoformat()),
            is_income=record.is_income,
            transaction_type=transaction_type,
            style=transaction_item_style(transaction_type, record.is_income),
        )
