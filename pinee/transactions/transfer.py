"""
Income to investment transfers.

Part (or all) of an income can be moved into a new investment. The
investment keeps a link to the income through source_transaction_id,
which also locks its status (see pinee.transactions.status).

- full transfer (amount equals the income, within 0.01): the income is deleted
- partial transfer: the income keeps the remaining amount
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pinee.models.transaction import (
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)


# Amounts closer than this are treated as the whole income
FULL_TRANSFER_TOLERANCE = Decimal("0.01")


class TransferError(ValueError):
    """The transfer cannot be made from this income with this amount."""
    pass


class InvestmentTransfer(BaseModel):
    """What a transfer changes in the store."""
    model_config = ConfigDict(frozen=True)

    investment: TransactionRecord = Field(
        ...,
        description="New investment record, not yet saved"
    )
    remaining_income: Optional[TransactionRecord] = Field(
        default=None,
        description="Income with the reduced amount (partial transfers)"
    )
    source_id: str

    @property
    def is_full_transfer(self) -> bool:
        return self.remaining_income is None


def plan_transfer(
    source: TransactionRecord,
    amount: Decimal,
    title: str,
    category: str = "",
    on: Optional[dt.date] = None,
) -> InvestmentTransfer:
    """
    Work out the records produced by moving `amount` of an income into an investment.

    Args:
        source: The income being transferred from (must have a store ID)
        amount: Amount to invest
        title: Title and description of the investment
        category: Investment category
        on: Investment date (defaults to today)

    Raises:
        TransferError: If the source is not a stored income, or the amount
                       is not positive or exceeds the income
    """
    if source.type != TransactionType.INCOME:
        raise TransferError("Apenas receitas podem ser transferidas para investimento")
    if source.id is None:
        raise TransferError("Salve a receita antes de transferir")
    if amount <= 0:
        raise TransferError("Valor inválido")
    if amount > source.amount:
        raise TransferError("Valor não pode exceder o valor da receita")

    investment = TransactionRecord(
        user_id=source.user_id,
        title=title,
        description=title,
        amount=amount,
        category=category,
        date=on or dt.date.today(),
        type=TransactionType.INVESTMENT,
        status=TransactionStatus.INVESTED.value,
        is_income=False,
        is_recurring=False,
        source_transaction_id=source.id,
    )

    remaining = None
    if abs(source.amount - amount) >= FULL_TRANSFER_TOLERANCE:
        remaining = source.model_copy(update={"amount": source.amount - amount})

    return InvestmentTransfer(
        investment=investment,
        remaining_income=remaining,
        source_id=source.id,
    )
