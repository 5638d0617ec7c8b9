"""
pt_BR display formatting for amounts and dates.

Amounts follow the Brazilian convention: 'R$ 1.234,56'.
"""

import math
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Union

CURRENCY_SYMBOL = "R$"

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

MONTH_ABBREVIATIONS = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
]

Number = Union[int, float, Decimal]

_CENT = Decimal("0.01")


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, float):
        if not math.isfinite(value):
            return Decimal("0")
        return Decimal(str(value))
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def _group_brl(value: Decimal) -> str:
    """'1234.5' -> '1.234,50' (no sign)."""
    rounded = abs(value).quantize(_CENT, rounding=ROUND_HALF_EVEN)
    us_style = f"{rounded:,.2f}"
    return us_style.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: Number, symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Format an amount as BRL currency.

    Non-finite values render as zero.
    """
    amount = _to_decimal(value)
    text = f"{symbol} {_group_brl(amount)}"
    if amount.quantize(_CENT, rounding=ROUND_HALF_EVEN) < 0:
        return f"-{text}"
    return text


def format_transaction_amount(
    value: Number,
    is_income: bool,
    is_investment: bool,
    symbol: str = CURRENCY_SYMBOL,
) -> str:
    """
    Signed amount for a list row: '+R$ 10,00' / '-R$ 10,00'.

    Investments are shown without a sign.
    """
    if is_investment:
        return format_currency(value, symbol)

    unsigned = format_currency(abs(_to_decimal(value)), symbol)
    return f"+{unsigned}" if is_income else f"-{unsigned}"


def format_short_date(date_str: str, date_format: str = "%Y-%m-%d") -> str:
    """'2025-06-24' -> '24 Jun'. Anything unparseable is returned unchanged."""
    if not date_str:
        return date_str

    try:
        parsed = datetime.strptime(date_str, date_format)
    except ValueError:
        return date_str
    if parsed.strftime(date_format) != date_str:
        return date_str

    return f"{parsed.day:02d} {MONTH_ABBREVIATIONS[parsed.month - 1]}"


def format_month_year(day: date) -> str:
    """date(2025, 6, 1) -> 'Junho 2025'."""
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"


def format_numeric_date(day: date) -> str:
    """date(2025, 6, 1) -> '01/06/2025'."""
    return day.strftime("%d/%m/%Y")


def format_percentage(value: Number) -> str:
    """'12.5%' with one decimal place."""
    return f"{_to_decimal(value):.1f}%"
