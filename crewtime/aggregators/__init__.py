"""Aggregators module for folding time entries into hour totals.

This module provides the single-pass aggregation the report builder uses
for daily, weekly and monthly reports.
"""

from crewtime.aggregators.hours_aggregator import (
    FAIL_ON_INVALID,
    SKIP_INVALID,
    EmployeeTotals,
    HoursAggregate,
    JobSiteTotals,
    NamedHours,
    PayPeriodTotals,
    aggregate_hours,
)

__all__ = [
    "FAIL_ON_INVALID",
    "SKIP_INVALID",
    "EmployeeTotals",
    "HoursAggregate",
    "JobSiteTotals",
    "NamedHours",
    "PayPeriodTotals",
    "aggregate_hours",
]
