"""Pay period and report window calculations.

The work week is fixed to Monday through Saturday. Every boundary is
computed in UTC, both for historical report windows and for the live
"today" window, so entry filtering and pay period keys agree on which day
an instant belongs to.
"""

import calendar
import datetime as dt
from typing import Union

from crewtime.models.pay_period import UTC, PayPeriod, ReportWindow, start_of_day
from crewtime.models.time_entry import ensure_utc

DateLike = Union[dt.date, dt.datetime]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def to_utc_date(value: DateLike) -> dt.date:
    """Return the UTC calendar day of a date or datetime."""
    if isinstance(value, dt.datetime):
        return ensure_utc(value).date()
    return value


def monday_of(value: DateLike) -> dt.date:
    """Return the Monday at or before ``value``.

    Sunday maps back six days, to the Monday of the week it closes.

    Example:
        >>> monday_of(dt.date(2024, 1, 10))  # Wednesday
        datetime.date(2024, 1, 8)
        >>> monday_of(dt.date(2024, 1, 14))  # Sunday
        datetime.date(2024, 1, 8)
    """
    day = to_utc_date(value)
    return day - dt.timedelta(days=day.weekday())


def saturday_of(monday: dt.date) -> dt.date:
    """Return the Saturday ending the pay period that starts on ``monday``."""
    return monday + dt.timedelta(days=5)


def pay_period_for(value: DateLike) -> PayPeriod:
    """Return the pay period a date or instant is keyed to."""
    monday = monday_of(value)
    return PayPeriod(start=monday, end=saturday_of(monday))


def day_window(day: dt.date) -> ReportWindow:
    """Window covering one UTC day: ``[day 00:00, day+1 00:00)``."""
    return ReportWindow(
        start=start_of_day(day), end=start_of_day(day + dt.timedelta(days=1))
    )


def week_window(any_day: DateLike) -> ReportWindow:
    """Window covering the Monday-to-Saturday week containing ``any_day``."""
    return pay_period_for(any_day).window()


def month_window(year: int, month: int) -> ReportWindow:
    """Window covering a calendar month, last day included."""
    _, last_day = calendar.monthrange(year, month)
    return ReportWindow(
        start=start_of_day(dt.date(year, month, 1)),
        end=start_of_day(dt.date(year, month, last_day) + dt.timedelta(days=1)),
    )


def today_window(now: dt.datetime) -> ReportWindow:
    """Window covering the UTC day that contains ``now``."""
    return day_window(ensure_utc(now).astimezone(UTC).date())


def month_name(month: int) -> str:
    """Return the English name of a month number (1-12)."""
    return MONTH_NAMES[month - 1]
