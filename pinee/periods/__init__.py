"""Period date range package."""

from pinee.periods.resolver import (
    ALL_TIME_LABEL,
    EPOCH,
    DateRangeProvider,
    InvalidDateRangeError,
    add_months,
    resolve_date_range,
)

__all__ = [
    "ALL_TIME_LABEL",
    "EPOCH",
    "DateRangeProvider",
    "InvalidDateRangeError",
    "add_months",
    "resolve_date_range",
]
