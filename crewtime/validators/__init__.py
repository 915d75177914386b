"""Validators for report query parameters."""

from crewtime.validators.report_params import (
    DailyReportParams,
    MonthlyReportParams,
    WeeklyReportParams,
    parse_daily_params,
    parse_monthly_params,
    parse_weekly_params,
)

__all__ = [
    "DailyReportParams",
    "MonthlyReportParams",
    "WeeklyReportParams",
    "parse_daily_params",
    "parse_monthly_params",
    "parse_weekly_params",
]
