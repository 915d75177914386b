"""Pay period and report window value objects.

The company's work week runs Monday to Saturday. Pay periods are derived
from any date on demand and never stored.
"""

import datetime as dt
from dataclasses import dataclass

UTC = dt.timezone.utc


def start_of_day(day: dt.date) -> dt.datetime:
    """Return midnight UTC at the start of ``day``."""
    return dt.datetime(day.year, day.month, day.day, tzinfo=UTC)


@dataclass(frozen=True)
class ReportWindow:
    """Half-open UTC interval ``[start, end)`` that selects entries by clock-in.

    Attributes:
        start: Inclusive lower bound
        end: Exclusive upper bound
    """

    start: dt.datetime
    end: dt.datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("Report window bounds must be timezone-aware")
        if self.end <= self.start:
            raise ValueError(
                f"Report window end ({self.end}) must be after start ({self.start})"
            )

    def contains(self, instant: dt.datetime) -> bool:
        """Check whether ``instant`` falls inside the window."""
        return self.start <= instant < self.end

    @property
    def first_day(self) -> dt.date:
        """First calendar day (UTC) covered by the window."""
        return self.start.astimezone(UTC).date()

    @property
    def last_day(self) -> dt.date:
        """Last calendar day (UTC) covered by the window."""
        return (self.end.astimezone(UTC) - dt.timedelta(microseconds=1)).date()


@dataclass(frozen=True)
class PayPeriod:
    """A Monday-to-Saturday pay period.

    Attributes:
        start: The Monday the period starts on
        end: The Saturday the period ends on (start + 5 days)

    Example:
        >>> period = PayPeriod(dt.date(2024, 1, 8), dt.date(2024, 1, 13))
        >>> period.label
        '2024-01-08 to 2024-01-13'
    """

    start: dt.date
    end: dt.date

    def __post_init__(self):
        if self.start.weekday() != 0:
            raise ValueError(f"Pay period must start on a Monday, got {self.start}")
        if self.end - self.start != dt.timedelta(days=5):
            raise ValueError(
                f"Pay period must end on the Saturday after {self.start}, "
                f"got {self.end}"
            )

    @property
    def key(self) -> str:
        """ISO date of the period's Monday, used to group and sort periods."""
        return self.start.isoformat()

    @property
    def label(self) -> str:
        """Human-readable range, e.g. '2024-01-08 to 2024-01-13'."""
        return f"{self.start.isoformat()} to {self.end.isoformat()}"

    def window(self) -> ReportWindow:
        """Half-open UTC window from Monday 00:00 to Sunday 00:00."""
        return ReportWindow(
            start=start_of_day(self.start),
            end=start_of_day(self.end + dt.timedelta(days=1)),
        )

    def is_within_month(self, year: int, month: int) -> bool:
        """Check whether every day of the period falls inside the month."""
        return (self.start.year, self.start.month) == (year, month) and (
            self.end.year,
            self.end.month,
        ) == (year, month)
