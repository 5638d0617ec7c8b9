"""
Status toggling rules.

Tapping a row's status chip flips it between its two states:

- expense:    paid     <-> unpaid
- investment: invested <-> pending
- income:     received <-> pending

Investments created by transferring an income keep a link to that income
(source_transaction_id); their status follows the income and cannot be
toggled on its own.
"""

from pinee.models.transaction import (
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)


class StatusToggleNotAllowedError(Exception):
    """The transaction's status cannot be changed directly."""
    pass


def next_status(record: TransactionRecord) -> str:
    """
    Status the record moves to when toggled.

    Raises:
        StatusToggleNotAllowedError: For investments transferred from an income
    """
    current = record.status

    if record.type == TransactionType.EXPENSE:
        if current == TransactionStatus.PAID.value:
            return TransactionStatus.UNPAID.value
        return TransactionStatus.PAID.value

    if record.type == TransactionType.INVESTMENT:
        if record.source_transaction_id is not None:
            raise StatusToggleNotAllowedError(
                "Investments transferred from an income cannot change status"
            )
        if current == TransactionStatus.INVESTED.value:
            return TransactionStatus.PENDING.value
        return TransactionStatus.INVESTED.value

    if current == TransactionStatus.RECEIVED.value:
        return TransactionStatus.PENDING.value
    return TransactionStatus.RECEIVED.value


def toggle_status(record: TransactionRecord) -> TransactionRecord:
    """Return a copy of the record with its status toggled."""
    return record.model_copy(update={"status": next_status(record)})
