"""Presentation rules for transaction list rows."""

from pinee.presentation.formatting import (
    CURRENCY_SYMBOL,
    format_currency,
    format_month_year,
    format_numeric_date,
    format_percentage,
    format_short_date,
    format_transaction_amount,
)
from pinee.presentation.swipe import SwipeableRow, SwipeState
from pinee.presentation.transaction_item import (
    RowColor,
    RowIcon,
    TransactionItemStyle,
    TransactionItemView,
    transaction_item_style,
)

__all__ = [
    "CURRENCY_SYMBOL",
    "RowColor",
    "RowIcon",
    "SwipeState",
    "SwipeableRow",
    "TransactionItemStyle",
    "TransactionItemView",
    "format_currency",
    "format_month_year",
    "format_numeric_date",
    "format_percentage",
    "format_short_date",
    "format_transaction_amount",
    "transaction_item_style",
]
