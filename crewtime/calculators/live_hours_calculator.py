"""Live "hours today" figures for the crew dashboard.

Unlike the report engine, these numbers depend on the current time: an
open entry counts from its clock-in up to ``now``. ``now`` is always passed
in so callers (and tests) control it.
"""

import datetime as dt
import logging
from typing import Dict, Iterable, List

from crewtime.calculators.pay_period_calculator import today_window
from crewtime.calculators.time_utils import entry_hours, hours_between, round_hours
from crewtime.exceptions import DataIntegrityError
from crewtime.models.reports import LiveEmployeeHours
from crewtime.models.time_entry import TimeEntry, ensure_utc

logger = logging.getLogger(__name__)


def calculate_live_hours(
    entries: Iterable[TimeEntry], now: dt.datetime
) -> List[LiveEmployeeHours]:
    """Calculate today's hours per employee, counting open entries up to now.

    Only entries clocked in during the UTC day containing ``now`` count.
    Employees appear in order of their first entry today. For an active
    employee the job site and clock-in time of the latest open entry are
    reported.

    Args:
        entries: Time entries, open or closed
        now: Current instant

    Returns:
        One LiveEmployeeHours per employee with activity today

    Example:
        >>> rows = calculate_live_hours(entries, now=dt.datetime.now(dt.timezone.utc))
        >>> [r.employee_name for r in rows if r.is_active]
        ['Ana Silva']
    """
    now = ensure_utc(now)
    window = today_window(now)

    hours: Dict[str, float] = {}
    names: Dict[str, str] = {}
    active: Dict[str, TimeEntry] = {}

    for entry in entries:
        if not window.contains(entry.clock_in_time):
            continue

        names.setdefault(entry.employee_id, entry.employee_name)
        hours.setdefault(entry.employee_id, 0.0)

        if entry.is_open:
            # A clock-in stamped after `now` (clock skew) counts as zero
            hours[entry.employee_id] += max(hours_between(entry.clock_in_time, now), 0.0)
            latest = active.get(entry.employee_id)
            if latest is None or entry.clock_in_time >= latest.clock_in_time:
                active[entry.employee_id] = entry
            continue

        try:
            hours[entry.employee_id] += entry_hours(entry)
        except DataIntegrityError as e:
            logger.warning(f"Ignoring entry in live hours: {e.message}")

    result: List[LiveEmployeeHours] = []
    for employee_id, worked in hours.items():
        open_entry = active.get(employee_id)
        result.append(
            LiveEmployeeHours(
                employee_id=employee_id,
                employee_name=names[employee_id],
                is_active=open_entry is not None,
                hours_today=round_hours(worked),
                job_site_id=open_entry.job_site_id if open_entry else None,
                job_site_name=open_entry.job_site_name if open_entry else None,
                clock_in_time=open_entry.clock_in_time if open_entry else None,
            )
        )

    logger.debug(
        f"Live hours at {now.isoformat()}: {len(result)} employees, "
        f"{len(active)} active"
    )
    return result


def total_live_hours(rows: Iterable[LiveEmployeeHours]) -> float:
    """Sum the rounded per-employee figures, as a crew total."""
    return round_hours(sum(row.hours_today for row in rows))
