"""Hours aggregator folding time entries into per-employee and per-site totals.

This module turns a list of closed time entries into the nested totals the
report builder shapes into reports:
- by employee, with a breakdown by job site
- by job site, with a breakdown by employee
- optionally, the same two groupings within each pay period (monthly reports)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from crewtime.calculators.pay_period_calculator import pay_period_for
from crewtime.calculators.time_utils import entry_hours
from crewtime.exceptions import DataIntegrityError
from crewtime.models.pay_period import PayPeriod
from crewtime.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)

SKIP_INVALID = "skip"
FAIL_ON_INVALID = "fail"


@dataclass(frozen=True)
class NamedHours:
    """Hours attributed to one entity (employee or job site) inside a group.

    Attributes:
        id: Stable identifier of the entity
        name: Display name taken from the first entry seen for that id
        hours: Unrounded hours
    """

    id: str
    name: str
    hours: float


@dataclass(frozen=True)
class EmployeeTotals:
    """Unrounded totals for one employee, with a breakdown by job site."""

    employee_id: str
    employee_name: str
    hours: float
    job_sites: Tuple[NamedHours, ...]


@dataclass(frozen=True)
class JobSiteTotals:
    """Unrounded totals for one job site, with a breakdown by employee."""

    job_site_id: str
    job_site_name: str
    hours: float
    employees: Tuple[NamedHours, ...]


@dataclass(frozen=True)
class PayPeriodTotals:
    """Unrounded totals of one pay period, grouped like the whole aggregate."""

    period: PayPeriod
    hours: float
    employees: Tuple[EmployeeTotals, ...]
    job_sites: Tuple[JobSiteTotals, ...]

    def employee(self, employee_id: str) -> Optional[EmployeeTotals]:
        """Return one employee's totals in this period, if they worked in it."""
        return next((e for e in self.employees if e.employee_id == employee_id), None)


@dataclass(frozen=True)
class HoursAggregate:
    """Result of one aggregation pass. Immutable.

    Groupings keep the order in which ids first appear in the input.

    Attributes:
        total_hours: Sum of all counted entry durations
        employees: Totals per employee
        job_sites: Totals per job site
        pay_periods: Totals per pay period, oldest first; empty unless
            requested
        entries: The entries that were counted
        skipped_count: Entries left out (open, or invalid under the skip
            policy)
    """

    total_hours: float = 0.0
    employees: Tuple[EmployeeTotals, ...] = ()
    job_sites: Tuple[JobSiteTotals, ...] = ()
    pay_periods: Tuple[PayPeriodTotals, ...] = ()
    entries: Tuple[TimeEntry, ...] = ()
    skipped_count: int = 0

    @property
    def entry_count(self) -> int:
        """Number of entries that contributed hours."""
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        """True when no entry contributed hours."""
        return not self.entries

    def period_hours_for(self, employee_id: str) -> List[float]:
        """Return one employee's unrounded hours in each pay period they worked."""
        hours = []
        for period in self.pay_periods:
            totals = period.employee(employee_id)
            if totals is not None:
                hours.append(totals.hours)
        return hours


@dataclass
class _Group:
    """Mutable running total used while folding entries."""

    name: str
    hours: float = 0.0
    members: Dict[str, List] = field(default_factory=dict)

    def add(self, member_id: str, member_name: str, hours: float) -> None:
        self.hours += hours
        if member_id not in self.members:
            self.members[member_id] = [member_name, 0.0]
        self.members[member_id][1] += hours

    def breakdown(self) -> Tuple[NamedHours, ...]:
        return tuple(
            NamedHours(id=member_id, name=name, hours=hours)
            for member_id, (name, hours) in self.members.items()
        )


@dataclass
class _Fold:
    """Employee and job site groups for one scope (whole input or one period)."""

    hours: float = 0.0
    employees: Dict[str, _Group] = field(default_factory=dict)
    job_sites: Dict[str, _Group] = field(default_factory=dict)

    def add(self, entry: TimeEntry, hours: float) -> None:
        self.hours += hours
        if entry.employee_id not in self.employees:
            self.employees[entry.employee_id] = _Group(name=entry.employee_name)
        self.employees[entry.employee_id].add(entry.job_site_id, entry.job_site_name, hours)
        if entry.job_site_id not in self.job_sites:
            self.job_sites[entry.job_site_id] = _Group(name=entry.job_site_name)
        self.job_sites[entry.job_site_id].add(entry.employee_id, entry.employee_name, hours)

    def employee_totals(self) -> Tuple[EmployeeTotals, ...]:
        return tuple(
            EmployeeTotals(
                employee_id=employee_id,
                employee_name=group.name,
                hours=group.hours,
                job_sites=group.breakdown(),
            )
            for employee_id, group in self.employees.items()
        )

    def job_site_totals(self) -> Tuple[JobSiteTotals, ...]:
        return tuple(
            JobSiteTotals(
                job_site_id=site_id,
                job_site_name=group.name,
                hours=group.hours,
                employees=group.breakdown(),
            )
            for site_id, group in self.job_sites.items()
        )


def aggregate_hours(
    entries: Iterable[TimeEntry],
    by_pay_period: bool = False,
    invalid_entry_policy: str = SKIP_INVALID,
) -> HoursAggregate:
    """Fold time entries into totals by employee, job site and pay period.

    Single pass: each entry's duration is computed once and added to every
    grouping. Groups are keyed by id, never by display name, so two
    employees sharing a name stay apart. Sums are kept unrounded; rounding
    is left to whoever displays the numbers.

    Open entries are skipped. A closed entry whose clock-out is not after
    its clock-in is skipped with a warning under the ``skip`` policy, or
    fails the whole aggregation under ``fail``.

    With ``by_pay_period`` each entry is also added to the pay period its
    clock-in is keyed to (Sunday joins the preceding Monday's period).

    Args:
        entries: Time entries to fold
        by_pay_period: Also build the employee and job site groupings per pay period
        invalid_entry_policy: SKIP_INVALID or FAIL_ON_INVALID

    Returns:
        HoursAggregate with all groupings

    Raises:
        DataIntegrityError: For an invalid entry under the fail policy
        ValueError: If the policy is unknown

    Example:
        >>> result = aggregate_hours(entries)
        >>> [(e.employee_name, e.hours) for e in result.employees]
        [('Ana Silva', 20.5)]
    """
    if invalid_entry_policy not in (SKIP_INVALID, FAIL_ON_INVALID):
        raise ValueError(
            f"Unknown invalid entry policy: {invalid_entry_policy}. "
            f"Expected {SKIP_INVALID} or {FAIL_ON_INVALID}"
        )

    skipped = 0
    counted: List[TimeEntry] = []
    overall = _Fold()
    periods: Dict[PayPeriod, _Fold] = {}

    for entry in entries:
        if entry.is_open:
            logger.debug(
                f"Skipping open entry {entry.entry_id} of employee {entry.employee_id}"
            )
            skipped += 1
            continue

        try:
            hours = entry_hours(entry)
        except DataIntegrityError as e:
            if invalid_entry_policy == FAIL_ON_INVALID:
                logger.error(f"Aborting aggregation: {e.message}")
                raise
            logger.warning(f"Skipping invalid entry: {e.message}")
            skipped += 1
            continue

        counted.append(entry)
        overall.add(entry, hours)

        if by_pay_period:
            periods.setdefault(pay_period_for(entry.clock_in_time), _Fold()).add(entry, hours)

    result = HoursAggregate(
        total_hours=overall.hours,
        employees=overall.employee_totals(),
        job_sites=overall.job_site_totals(),
        pay_periods=tuple(
            PayPeriodTotals(
                period=period,
                hours=fold.hours,
                employees=fold.employee_totals(),
                job_sites=fold.job_site_totals(),
            )
            for period, fold in sorted(periods.items(), key=lambda item: item[0].start)
        ),
        entries=tuple(counted),
        skipped_count=skipped,
    )

    logger.info(
        f"Aggregated {result.entry_count} entries into {len(result.employees)} "
        f"employees and {len(result.job_sites)} job sites "
        f"({skipped} skipped)"
    )
    return result
