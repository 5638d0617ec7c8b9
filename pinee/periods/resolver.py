"""
Period Date Ranges

Turns a period filter and a selected date into a DateRange with a pt_BR
label, and keeps the app's selected period in one provider object.

DESIGN DECISION: The selected period is owned by a DateRangeProvider
instance that callers pass around, not by a module-level global.

Weeks run Sunday to Saturday (pt_BR calendar).
"""

import calendar
from datetime import date, timedelta
from typing import Optional

from pinee.models.transaction import DateRange, PeriodFilter
from pinee.presentation.formatting import (
    MONTH_ABBREVIATIONS,
    format_month_year,
    format_numeric_date,
)


# Earliest date considered by "all time" and by the consolidated balance
EPOCH = date(1970, 1, 1)

ALL_TIME_LABEL = "Todo o período"


class InvalidDateRangeError(ValueError):
    """A custom range was missing a bound or ended before it started."""
    pass


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _short_day(day: date) -> str:
    return f"{day.day:02d} {MONTH_ABBREVIATIONS[day.month - 1]}"


def resolve_date_range(
    period: PeriodFilter,
    reference: date,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> DateRange:
    """
    Compute the range for a period around a reference date.

    Raises:
        InvalidDateRangeError: For a custom period without both bounds,
                               or with end before start
    """
    if period == PeriodFilter.DAILY:
        return DateRange(
            start=reference,
            end=reference,
            display_text=f"{_short_day(reference)} {reference.year}",
        )

    if period == PeriodFilter.WEEKLY:
        # date.weekday(): Monday=0 ... Sunday=6
        start = reference - timedelta(days=(reference.weekday() + 1) % 7)
        end = start + timedelta(days=6)
        return DateRange(
            start=start,
            end=end,
            display_text=f"{_short_day(start)} - {_short_day(end)} {end.year}",
        )

    if period == PeriodFilter.MONTHLY:
        last_day = calendar.monthrange(reference.year, reference.month)[1]
        return DateRange(
            start=reference.replace(day=1),
            end=reference.replace(day=last_day),
            display_text=format_month_year(reference),
        )

    if period == PeriodFilter.YEARLY:
        return DateRange(
            start=date(reference.year, 1, 1),
            end=date(reference.year, 12, 31),
            display_text=str(reference.year),
        )

    if period == PeriodFilter.CUSTOM:
        if custom_start is None or custom_end is None:
            raise InvalidDateRangeError("Custom period needs both start and end dates")
        if custom_end < custom_start:
            raise InvalidDateRangeError(
                f"Custom period ends ({custom_end}) before it starts ({custom_start})"
            )
        return DateRange(
            start=custom_start,
            end=custom_end,
            display_text=(
                f"{format_numeric_date(custom_start)} - {format_numeric_date(custom_end)}"
            ),
        )

    # ALL_TIME
    return DateRange(
        start=EPOCH,
        end=date(max(reference.year, EPOCH.year), 12, 31),
        display_text=ALL_TIME_LABEL,
    )


class DateRangeProvider:
    """
    Holds the period the user is looking at.

    One instance per session. Screens read the current range from it and
    the balance flow reads the consolidated balance range.
    """

    def __init__(
        self,
        period: PeriodFilter = PeriodFilter.MONTHLY,
        selected_date: Optional[date] = None,
        custom_start: Optional[date] = None,
        custom_end: Optional[date] = None,
    ):
        self.period = period
        self.selected_date = selected_date or date.today()
        self.custom_start = custom_start
        self.custom_end = custom_end

    def select_period(self, period: PeriodFilter) -> None:
        self.period = period

    def update_selected_date(self, day: date) -> None:
        self.selected_date = day

    def set_custom_range(self, start: date, end: date) -> None:
        """Switch to a custom period. Raises InvalidDateRangeError if end < start."""
        if end < start:
            raise InvalidDateRangeError(
                f"Custom period ends ({end}) before it starts ({start})"
            )
        self.custom_start = start
        self.custom_end = end
        self.period = PeriodFilter.CUSTOM

    def get_current_date_range(self) -> DateRange:
        return resolve_date_range(
            self.period,
            self.selected_date,
            custom_start=self.custom_start,
            custom_end=self.custom_end,
        )

    def get_consolidated_balance_date_range(self) -> DateRange:
        """
        Everything up to the end of the current period.

        The consolidated balance is cumulative: money received last year
        is still in the account this month.
        """
        end = self.get_current_date_range().end
        return DateRange(
            start=EPOCH,
            end=end,
            display_text=f"Saldo até {format_numeric_date(end)}",
        )

    def previous_period(self) -> None:
        self._shift(-1)

    def next_period(self) -> None:
        self._shift(1)

    def _shift(self, steps: int) -> None:
        if self.period == PeriodFilter.DAILY:
            self.selected_date += timedelta(days=steps)
        elif self.period == PeriodFilter.WEEKLY:
            self.selected_date += timedelta(weeks=steps)
        elif self.period == PeriodFilter.MONTHLY:
            self.selected_date = add_months(self.selected_date, steps)
        elif self.period == PeriodFilter.YEARLY:
            self.selected_date = add_months(self.selected_date, 12 * steps)
        elif self.period == PeriodFilter.CUSTOM and self.custom_start and self.custom_end:
            # Move the whole window by its own length
            span = (self.custom_end - self.custom_start) + timedelta(days=1)
            self.custom_start += span * steps
            self.custom_end += span * steps
        # ALL_TIME has nothing to navigate
