"""Report output shapes.

These models are what the report screen receives as JSON and what the CSV
writer flattens. Every hour figure in them is already rounded to 2 decimals.
"""

import datetime as dt
from typing import ClassVar, List, Optional

from pydantic import Field

from crewtime.models.base import ReportModel
from crewtime.models.time_entry import TimeEntry


class EmployeeJobSiteHours(ReportModel):
    """Hours one employee spent at one job site."""

    job_site_id: str
    job_site_name: str
    hours: float


class JobSiteEmployeeHours(ReportModel):
    """Hours one employee contributed to one job site."""

    employee_id: str
    employee_name: str
    hours: float


class DailyEmployeeHours(ReportModel):
    """Per-employee line of a daily report. Daily reports carry no overtime."""

    employee_id: str
    employee_name: str
    hours_worked: float
    job_sites: List[EmployeeJobSiteHours] = Field(default_factory=list)


class EmployeeHourSummary(ReportModel):
    """Per-employee totals with the regular/overtime split.

    Attributes:
        regular_hours: min(total, threshold)
        overtime_hours: max(total - threshold, 0)
        total_hours: All hours in the period
        has_overtime: total > threshold
        job_sites: Breakdown by job site
    """

    employee_id: str
    employee_name: str
    regular_hours: float
    overtime_hours: float
    total_hours: float
    has_overtime: bool
    job_sites: List[EmployeeJobSiteHours] = Field(default_factory=list)


class JobSiteHourSummary(ReportModel):
    """Per-job-site totals with a breakdown by employee."""

    job_site_id: str
    job_site_name: str
    total_hours: float
    employees: List[JobSiteEmployeeHours] = Field(default_factory=list)


class PayPeriodReport(ReportModel):
    """One Monday-to-Saturday pay period inside a monthly report.

    ``is_partial`` is set when the period reaches outside the calendar
    month; such a period only holds the entries that fall inside the month.
    """

    period_start: dt.date
    period_end: dt.date
    total_hours: float
    is_partial: bool
    employees: List[EmployeeHourSummary] = Field(default_factory=list)
    job_sites: List[JobSiteHourSummary] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """Human-readable range, e.g. '2024-01-08 to 2024-01-13'."""
        return f"{self.period_start.isoformat()} to {self.period_end.isoformat()}"


class DailyReport(ReportModel):
    """Hours worked on a single day."""

    report_type: ClassVar[str] = "daily"

    date: dt.date
    total_hours: float
    employees: List[DailyEmployeeHours] = Field(default_factory=list)
    job_sites: List[JobSiteHourSummary] = Field(default_factory=list)
    # Closed entries the report was built from, for row-per-shift CSV export
    entries: List[TimeEntry] = Field(default_factory=list, exclude=True)


class WeeklyReport(ReportModel):
    """Hours worked in one Monday-to-Saturday week, with overtime."""

    report_type: ClassVar[str] = "weekly"

    week_start: dt.date
    week_end: dt.date
    total_hours: float
    employees: List[EmployeeHourSummary] = Field(default_factory=list)
    job_sites: List[JobSiteHourSummary] = Field(default_factory=list)
    entries: List[TimeEntry] = Field(default_factory=list, exclude=True)


class MonthlyReport(ReportModel):
    """Hours worked in a calendar month, broken down by pay period."""

    report_type: ClassVar[str] = "monthly"

    month: str
    year: int
    month_number: int = Field(..., ge=1, le=12, exclude=True)
    total_hours: float
    pay_periods: List[PayPeriodReport] = Field(default_factory=list)
    employees: List[EmployeeHourSummary] = Field(default_factory=list)
    job_sites: List[JobSiteHourSummary] = Field(default_factory=list)
    entries: List[TimeEntry] = Field(default_factory=list, exclude=True)

    def find_pay_period(self, period_start: dt.date) -> Optional[PayPeriodReport]:
        """Return the pay period starting on ``period_start``, if present."""
        for period in self.pay_periods:
            if period.period_start == period_start:
                return period
        return None


class LiveEmployeeHours(ReportModel):
    """Hours an employee has worked today, counting an open entry up to now."""

    employee_id: str
    employee_name: str
    is_active: bool
    hours_today: float
    job_site_id: Optional[str] = None
    job_site_name: Optional[str] = None
    clock_in_time: Optional[dt.datetime] = None
