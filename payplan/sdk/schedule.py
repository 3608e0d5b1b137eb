"""Paycheck date schedules.

A schedule starts at the first paycheck date and advances by a fixed number
of days per pay frequency. Semimonthly and monthly are approximated as 15 and
30 days.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union


logger = logging.getLogger(__name__)

FREQUENCY_DAYS = {
    "weekly": 7,
    "biweekly": 14,
    "semimonthly": 15,
    "monthly": 30,
}


class ScheduleConfigError(ValueError):
    """Raised when a schedule cannot be built from its arguments."""
    pass


def parse_date(date_str: Union[str, date]) -> date:
    """Parse a date string in YYYY-MM-DD format."""
    if isinstance(date_str, date):
        return date_str
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def normalize_frequency(frequency: str) -> str:
    """Normalize a frequency name ('Semi-Monthly' -> 'semimonthly').

    Raises:
        ScheduleConfigError: If the name is not a known frequency
    """
    key = str(frequency).strip().lower().replace("_", "").replace("-", "")
    if key not in FREQUENCY_DAYS:
        valid = ", ".join(FREQUENCY_DAYS)
        raise ScheduleConfigError(f"Unsupported frequency '{frequency}' (expected one of: {valid})")
    return key


class PaycheckDates:
    """Lazy, restartable sequence of paycheck dates within one year.

    Each iteration walks the schedule again from the first paycheck date.
    """

    def __init__(self, first_date: date, increment_days: int, year: int, limit: Optional[int]):
        self.first_date = first_date
        self.increment_days = increment_days
        self.year = year
        self.limit = limit

    def __iter__(self) -> Iterator[date]:
        current = self.first_date
        produced = 0
        while current.year == self.year:
            if self.limit is not None and produced >= self.limit:
                return
            yield current
            produced += 1
            # A zero step can never advance past the first date
            if self.increment_days == 0:
                return
            current += timedelta(days=self.increment_days)

    def __repr__(self) -> str:
        return (
            f"PaycheckDates(first_date={self.first_date.isoformat()}, "
            f"increment_days={self.increment_days}, year={self.year}, limit={self.limit})"
        )


class PaycheckSchedule:
    """Paycheck dates for one job.

    Built from a first paycheck date plus a pay frequency, an explicit
    paycheck count, or both. When only a count is given the increment is
    zero, so the schedule yields just the first paycheck date.
    """

    def __init__(
        self,
        first_paycheck_date: Union[str, date, None],
        frequency: Optional[str] = None,
        paycheck_count: Optional[int] = None,
    ):
        if first_paycheck_date is None:
            raise ScheduleConfigError("first paycheck date required")
        try:
            self.first_paycheck_date = parse_date(first_paycheck_date)
        except (TypeError, ValueError) as e:
            raise ScheduleConfigError(f"Invalid first paycheck date '{first_paycheck_date}': {e}") from e

        if frequency is None and paycheck_count is None:
            raise ScheduleConfigError("Either frequency or paycheck_count required")

        self.frequency = normalize_frequency(frequency) if frequency is not None else None

        if paycheck_count is not None and paycheck_count <= 0:
            raise ScheduleConfigError(f"paycheck_count must be positive, got {paycheck_count}")
        self.paycheck_count = paycheck_count

    @property
    def increment_days(self) -> int:
        """Days between paychecks (0 for a count-only schedule)."""
        if self.frequency is not None:
            return FREQUENCY_DAYS[self.frequency]
        return 0

    def dates_for_year(self, year: Optional[int] = None) -> PaycheckDates:
        """Get paycheck dates falling in a tax year.

        Args:
            year: Tax year (defaults to the first paycheck date's year)

        Returns:
            PaycheckDates iterable; stops at the year boundary or after
            paycheck_count dates, whichever comes first
        """
        if year is None:
            year = self.first_paycheck_date.year
        dates = PaycheckDates(self.first_paycheck_date, self.increment_days, year, self.paycheck_count)
        logger.debug(f"Schedule for {year}: {dates!r}")
        return dates
