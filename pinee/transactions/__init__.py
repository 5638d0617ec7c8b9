"""Transaction rules package."""

from pinee.transactions.status import (
    StatusToggleNotAllowedError,
    next_status,
    toggle_status,
)
from pinee.transactions.transfer import (
    InvestmentTransfer,
    TransferError,
    plan_transfer,
)

__all__ = [
    "StatusToggleNotAllowedError",
    "next_status",
    "toggle_status",
    "InvestmentTransfer",
    "TransferError",
    "plan_transfer",
]
