"""Data models for the report engine.

This package contains:
- BaseDataModel / ReportModel: Base classes with common configuration
- TimeEntry: One clock-in/clock-out record
- PayPeriod / ReportWindow: Derived date value objects
- Report shapes for daily, weekly and monthly reports
"""

from crewtime.models.base import BaseDataModel, ReportModel
from crewtime.models.pay_period import PayPeriod, ReportWindow
from crewtime.models.reports import (
    DailyEmployeeHours,
    DailyReport,
    EmployeeHourSummary,
    EmployeeJobSiteHours,
    JobSiteEmployeeHours,
    JobSiteHourSummary,
    LiveEmployeeHours,
    MonthlyReport,
    PayPeriodReport,
    WeeklyReport,
)
from crewtime.models.time_entry import TimeEntry

__all__ = [
    "BaseDataModel",
    "ReportModel",
    "TimeEntry",
    "PayPeriod",
    "ReportWindow",
    "DailyEmployeeHours",
    "DailyReport",
    "EmployeeHourSummary",
    "EmployeeJobSiteHours",
    "JobSiteEmployeeHours",
    "JobSiteHourSummary",
    "LiveEmployeeHours",
    "MonthlyReport",
    "PayPeriodReport",
    "WeeklyReport",
]
