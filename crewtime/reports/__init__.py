"""Report building for daily, weekly and monthly hour reports."""

from crewtime.reports.report_builder import ReportBuilder

__all__ = ["ReportBuilder"]
