"""Report builder for daily, weekly and monthly hour reports.

This module validates report parameters, fetches the closed time entries of
the report window from an entry source, aggregates them and shapes the
totals into the report models the report screen and CSV export consume.
"""

import logging
from typing import Any, Iterable, List, Optional

from crewtime.aggregators.hours_aggregator import (
    EmployeeTotals,
    HoursAggregate,
    JobSiteTotals,
    NamedHours,
    aggregate_hours,
)
from crewtime.calculators.overtime_calculator import monthly_overtime, split_overtime
from crewtime.calculators.pay_period_calculator import (
    day_window,
    month_name,
    month_window,
    pay_period_for,
    week_window,
)
from crewtime.calculators.time_utils import round_hours
from crewtime.config.settings import CrewTimeConfig, get_config
from crewtime.models.pay_period import ReportWindow
from crewtime.models.reports import (
    DailyEmployeeHours,
    DailyReport,
    EmployeeHourSummary,
    EmployeeJobSiteHours,
    JobSiteEmployeeHours,
    JobSiteHourSummary,
    MonthlyReport,
    PayPeriodReport,
    WeeklyReport,
)
from crewtime.readers.entry_source import EntrySource, select_entries
from crewtime.utils.logging_utils import report_context
from crewtime.validators.report_params import (
    parse_daily_params,
    parse_monthly_params,
    parse_weekly_params,
)

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Builds hour reports from an entry source.

    Every build:
    1. Validates the parameters (nothing is fetched if they are malformed)
    2. Computes the UTC report window
    3. Fetches the window's closed entries, filtered to one employee if asked
    4. Aggregates the entries in one pass
    5. Shapes and rounds the totals

    Builds share no state, so one builder can serve concurrent requests.
    Errors from the source propagate unchanged.

    Attributes:
        source: Storage collaborator providing time entries
        settings: Overtime threshold and policies

    Example:
        >>> builder = ReportBuilder(CsvEntryReader("time_entries.csv"))
        >>> report = builder.weekly("2024-01-10")
        >>> report.week_start
        datetime.date(2024, 1, 8)
    """

    def __init__(self, source: EntrySource, settings: Optional[CrewTimeConfig] = None):
        """Initialize the builder.

        Args:
            source: Entry source to read time entries from
            settings: Application settings (global configuration by default)
        """
        self.source = source
        self.settings = settings or get_config()

    @property
    def threshold(self) -> float:
        """Weekly overtime threshold in hours."""
        return self.settings.overtime_threshold_hours

    def daily(self, date: Any, employee_id: Any = None) -> DailyReport:
        """Build the report for one day.

        Args:
            date: The day, as a date or YYYY-MM-DD string
            employee_id: Restrict the report to one employee

        Returns:
            DailyReport (no overtime split)

        Raises:
            ValidationError: If a parameter is malformed
            UpstreamFetchError: If the entry source fails
            DataIntegrityError: For an invalid entry under the fail policy
        """
        params = parse_daily_params(date, employee_id)

        with report_context("daily", date=params.date, employee_id=params.employee_id):
            logger.info(f"Generating daily report for {params.date}")
            window = day_window(params.date)
            aggregate = self._aggregate(window, params.employee_id)

            report = DailyReport(
                date=params.date,
                total_hours=round_hours(aggregate.total_hours),
                employees=[
                    DailyEmployeeHours(
                        employee_id=emp.employee_id,
                        employee_name=emp.employee_name,
                        hours_worked=round_hours(emp.hours),
                        job_sites=_site_breakdown(emp.job_sites),
                    )
                    for emp in aggregate.employees
                ],
                job_sites=_job_site_summaries(aggregate.job_sites),
                entries=list(aggregate.entries),
            )

            logger.info(
                f"Daily report generated for {params.date}: "
                f"{report.total_hours} hours, {len(report.employees)} employees"
            )
            return report

    def weekly(self, start_date: Any, employee_id: Any = None) -> WeeklyReport:
        """Build the report for the Monday-to-Saturday week containing a day.

        Args:
            start_date: Any day of the week, as a date or YYYY-MM-DD string
            employee_id: Restrict the report to one employee

        Returns:
            WeeklyReport with the overtime split per employee

        Raises:
            ValidationError: If a parameter is malformed
            UpstreamFetchError: If the entry source fails
            DataIntegrityError: For an invalid entry under the fail policy
        """
        params = parse_weekly_params(start_date, employee_id)
        period = pay_period_for(params.start_date)

        with report_context("weekly", week_start=period.start, employee_id=params.employee_id):
            logger.info(f"Generating weekly report for {period.label}")
            aggregate = self._aggregate(week_window(period.start), params.employee_id)

            report = WeeklyReport(
                week_start=period.start,
                week_end=period.end,
                total_hours=round_hours(aggregate.total_hours),
                employees=[
                    self._employee_summary(emp, emp.hours) for emp in aggregate.employees
                ],
                job_sites=_job_site_summaries(aggregate.job_sites),
                entries=list(aggregate.entries),
            )

            logger.info(
                f"Weekly report generated for {period.label}: "
                f"{report.total_hours} hours, "
                f"{sum(e.has_overtime for e in report.employees)} with overtime"
            )
            return report

    def monthly(self, year: Any, month: Any, employee_id: Any = None) -> MonthlyReport:
        """Build the report for a calendar month, broken down by pay period.

        Entries are selected by calendar month and bucketed by the Monday of
        their clock-in day. The first and last pay periods can reach into
        the neighbouring months; they keep their Monday-to-Saturday bounds,
        hold only this month's entries and are flagged ``is_partial``.

        The employee-level overtime of the month follows the configured
        monthly overtime policy; each pay period's overtime is always
        computed against that period alone.

        Args:
            year: Year in [2000, 2100]
            month: Month in [1, 12]
            employee_id: Restrict the report to one employee

        Returns:
            MonthlyReport

        Raises:
            ValidationError: If a parameter is malformed
            UpstreamFetchError: If the entry source fails
            DataIntegrityError: For an invalid entry under the fail policy
        """
        params = parse_monthly_params(year, month, employee_id)

        with report_context(
            "monthly", year=params.year, month=params.month, employee_id=params.employee_id
        ):
            logger.info(f"Generating monthly report for {params.year}-{params.month:02d}")
            window = month_window(params.year, params.month)
            aggregate = self._aggregate(window, params.employee_id, by_pay_period=True)

            pay_periods = [
                PayPeriodReport(
                    period_start=totals.period.start,
                    period_end=totals.period.end,
                    total_hours=round_hours(totals.hours),
                    is_partial=not totals.period.is_within_month(params.year, params.month),
                    employees=[
                        self._employee_summary(emp, emp.hours) for emp in totals.employees
                    ],
                    job_sites=_job_site_summaries(totals.job_sites),
                )
                for totals in aggregate.pay_periods
            ]

            employees = []
            for emp in aggregate.employees:
                split = monthly_overtime(
                    emp.hours,
                    aggregate.period_hours_for(emp.employee_id),
                    threshold=self.threshold,
                    policy=self.settings.monthly_overtime_policy,
                )
                employees.append(
                    EmployeeHourSummary(
                        employee_id=emp.employee_id,
                        employee_name=emp.employee_name,
                        regular_hours=split.regular_hours,
                        overtime_hours=split.overtime_hours,
                        total_hours=split.total_hours,
                        has_overtime=split.has_overtime,
                        job_sites=_site_breakdown(emp.job_sites),
                    )
                )

            report = MonthlyReport(
                month=month_name(params.month),
                year=params.year,
                month_number=params.month,
                total_hours=round_hours(aggregate.total_hours),
                pay_periods=pay_periods,
                employees=employees,
                job_sites=_job_site_summaries(aggregate.job_sites),
                entries=list(aggregate.entries),
            )

            logger.info(
                f"Monthly report generated for {report.month} {report.year}: "
                f"{report.total_hours} hours in {len(pay_periods)} pay periods"
            )
            return report

    def _aggregate(
        self,
        window: ReportWindow,
        employee_id: Optional[str],
        by_pay_period: bool = False,
    ) -> HoursAggregate:
        entries = self.source.fetch_closed_entries(window.start, window.end, employee_id)
        # The source may return more than asked for; filter before aggregating
        selected = select_entries(
            entries, window.start, window.end, employee_id, closed_only=True
        )
        if len(selected) != len(entries):
            logger.debug(
                f"Dropped {len(entries) - len(selected)} entries outside "
                f"the report window or employee filter"
            )
        return aggregate_hours(
            selected,
            by_pay_period=by_pay_period,
            invalid_entry_policy=self.settings.invalid_entry_policy,
        )

    def _employee_summary(self, emp: EmployeeTotals, hours: float) -> EmployeeHourSummary:
        split = split_overtime(hours, self.threshold)
        return EmployeeHourSummary(
            employee_id=emp.employee_id,
            employee_name=emp.employee_name,
            regular_hours=split.regular_hours,
            overtime_hours=split.overtime_hours,
            total_hours=split.total_hours,
            has_overtime=split.has_overtime,
            job_sites=_site_breakdown(emp.job_sites),
        )


def _site_breakdown(job_sites: Iterable[NamedHours]) -> List[EmployeeJobSiteHours]:
    return [
        EmployeeJobSiteHours(
            job_site_id=site.id, job_site_name=site.name, hours=round_hours(site.hours)
        )
        for site in job_sites
    ]


def _job_site_summaries(job_sites: Iterable[JobSiteTotals]) -> List[JobSiteHourSummary]:
    return [
        JobSiteHourSummary(
            job_site_id=site.job_site_id,
            job_site_name=site.job_site_name,
            total_hours=round_hours(site.hours),
            employees=[
                JobSiteEmployeeHours(
                    employee_id=emp.id, employee_name=emp.name, hours=round_hours(emp.hours)
                )
                for emp in site.employees
            ],
        )
        for site in job_sites
    ]
