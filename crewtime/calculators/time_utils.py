"""Time calculation utilities for the report engine.

This module provides the low-level interval arithmetic:
- Elapsed hours between a clock-in and a clock-out
- Half-up rounding of hour figures to 2 decimals

All instants are expected to be timezone-aware (UTC); see
``crewtime.models.time_entry.ensure_utc``.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from crewtime.exceptions import DataIntegrityError
from crewtime.models.time_entry import TimeEntry

SECONDS_PER_HOUR = 3600
HOURS_QUANTUM = Decimal("0.01")


def hours_between(start: dt.datetime, end: dt.datetime) -> float:
    """Return the signed number of hours from ``start`` to ``end``.

    Example:
        >>> hours_between(
        ...     dt.datetime(2024, 1, 8, 8, 0), dt.datetime(2024, 1, 8, 16, 30)
        ... )
        8.5
    """
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def duration_hours(
    clock_in_time: dt.datetime, clock_out_time: Optional[dt.datetime]
) -> float:
    """Calculate the worked hours of a clock-in/clock-out pair.

    Args:
        clock_in_time: Clock-in instant
        clock_out_time: Clock-out instant, None for an open entry

    Returns:
        Elapsed hours as a float; 0.0 when the entry is still open

    Raises:
        DataIntegrityError: If the clock-out is not after the clock-in

    Example:
        >>> duration_hours(
        ...     dt.datetime(2024, 1, 9, 8, 0), dt.datetime(2024, 1, 9, 20, 0)
        ... )
        12.0
        >>> duration_hours(dt.datetime(2024, 1, 9, 8, 0), None)
        0.0
    """
    if clock_out_time is None:
        return 0.0

    hours = hours_between(clock_in_time, clock_out_time)
    if hours <= 0:
        raise DataIntegrityError(
            f"Clock-out ({clock_out_time.isoformat()}) must be after "
            f"clock-in ({clock_in_time.isoformat()})",
            recovery_hint="Correct the clock-out time of the entry in the time tracker",
        )
    return hours


def entry_hours(entry: TimeEntry) -> float:
    """Calculate the worked hours of a time entry.

    Raises:
        DataIntegrityError: If the entry is closed with clock-out <= clock-in.
            The message names the entry and employee.
    """
    try:
        return duration_hours(entry.clock_in_time, entry.clock_out_time)
    except DataIntegrityError as e:
        label = entry.entry_id or "<unsaved>"
        raise DataIntegrityError(
            f"Time entry {label} for employee {entry.employee_id}: {e.message}",
            recovery_hint=e.recovery_hint,
        ) from e


def round_hours(hours: float) -> float:
    """Round an hour figure to 2 decimals, halves away from zero.

    Rounding goes through ``Decimal`` on the shortest repr of the float, so
    a value such as 2.675 rounds to 2.68 rather than 2.67.

    Example:
        >>> round_hours(8.333333)
        8.33
        >>> round_hours(2.675)
        2.68
    """
    return float(Decimal(repr(hours)).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP))
