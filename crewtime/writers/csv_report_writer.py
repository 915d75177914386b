"""CSV export of daily, weekly and monthly reports.

This module flattens report models into DataFrames and renders them as CSV
text for spreadsheet download. Quoting is minimal: a field is wrapped in
double quotes only when it holds a comma, a double quote or a line break,
and embedded double quotes are doubled.

Hour figures are written the way the crew app writes them: at most two
decimals with trailing zeros dropped (`8`, `8.5`, `8.33`). Rows are joined
with line feeds and the text does not end with a line break.
"""

import logging
from typing import Union

import pandas as pd

from crewtime.calculators.time_utils import entry_hours, round_hours
from crewtime.models.reports import (
    DailyReport,
    EmployeeHourSummary,
    MonthlyReport,
    WeeklyReport,
)

logger = logging.getLogger(__name__)

Report = Union[DailyReport, WeeklyReport, MonthlyReport]

DAILY_COLUMNS = ["Employee Name", "Job Site", "Hours Worked", "Date"]
WEEKLY_COLUMNS = [
    "Employee Name",
    "Regular Hours",
    "Overtime Hours",
    "Total Hours",
    "Overtime Flag",
    "Job Sites",
]
MONTHLY_COLUMNS = [
    "Employee Name",
    "Pay Period",
    "Regular Hours",
    "Overtime Hours",
    "Total Hours",
    "Overtime Flag",
    "Job Sites",
]

JOB_SITE_SEPARATOR = "; "

HOUR_COLUMNS = ["Hours Worked", "Regular Hours", "Overtime Hours", "Total Hours"]


class CsvReportWriter:
    """Render reports as CSV text.

    One row per shift for daily reports, one row per employee for weekly
    reports and one row per employee and pay period for monthly reports.

    Example:
        >>> writer = CsvReportWriter()
        >>> print(writer.render(weekly_report))
        Employee Name,Regular Hours,Overtime Hours,Total Hours,Overtime Flag,Job Sites
        Ana Silva,40,5,45,Yes,Harbor Tower
    """

    def render(self, report: Report) -> str:
        """Render a report as CSV text with a header row.

        Args:
            report: Daily, weekly or monthly report

        Returns:
            CSV text, rows separated by ``\\n``, no trailing line break

        Raises:
            TypeError: If the report type is not supported
        """
        df = self.to_dataframe(report)
        logger.debug(f"Rendering {report.report_type} report as CSV ({len(df)} rows)")
        for column in HOUR_COLUMNS:
            if column in df.columns:
                df[column] = df[column].map(format_hours)
        text = df.to_csv(index=False, lineterminator="\n")
        return text[:-1] if text.endswith("\n") else text

    def to_dataframe(self, report: Report) -> pd.DataFrame:
        """Flatten a report into the DataFrame that is written out."""
        if isinstance(report, DailyReport):
            return self._daily_rows(report)
        if isinstance(report, WeeklyReport):
            return self._weekly_rows(report)
        if isinstance(report, MonthlyReport):
            return self._monthly_rows(report)
        raise TypeError(f"Unsupported report type: {type(report).__name__}")

    def write(self, report: Report, path: str) -> str:
        """Write a report's CSV to a file and return the path."""
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self.render(report))
        logger.info(f"Wrote {report.report_type} report to {path}")
        return path

    def _daily_rows(self, report: DailyReport) -> pd.DataFrame:
        rows = [
            {
                "Employee Name": entry.employee_name,
                "Job Site": entry.job_site_name,
                "Hours Worked": round_hours(entry_hours(entry)),
                "Date": entry.clock_in_time.date().isoformat(),
            }
            for entry in report.entries
        ]
        return pd.DataFrame(rows, columns=DAILY_COLUMNS)

    def _weekly_rows(self, report: WeeklyReport) -> pd.DataFrame:
        rows = [
            {"Employee Name": emp.employee_name, **_split_columns(emp)}
            for emp in report.employees
        ]
        return pd.DataFrame(rows, columns=WEEKLY_COLUMNS)

    def _monthly_rows(self, report: MonthlyReport) -> pd.DataFrame:
        keyed = []
        for period in report.pay_periods:
            for emp in period.employees:
                row = {
                    "Employee Name": emp.employee_name,
                    "Pay Period": period.label,
                    **_split_columns(emp),
                }
                keyed.append(((emp.employee_name, emp.employee_id, period.period_start), row))
        keyed.sort(key=lambda item: item[0])
        return pd.DataFrame([row for _, row in keyed], columns=MONTHLY_COLUMNS)


def _split_columns(emp: EmployeeHourSummary) -> dict:
    return {
        "Regular Hours": emp.regular_hours,
        "Overtime Hours": emp.overtime_hours,
        "Total Hours": emp.total_hours,
        "Overtime Flag": "Yes" if emp.has_overtime else "No",
        "Job Sites": JOB_SITE_SEPARATOR.join(site.job_site_name for site in emp.job_sites),
    }


def suggested_filename(report: Report) -> str:
    """Return the download file name for a report.

    Example:
        >>> suggested_filename(monthly_report)
        'monthly-report-2024-01.csv'
    """
    if isinstance(report, DailyReport):
        return f"daily-report-{report.date.isoformat()}.csv"
    if isinstance(report, WeeklyReport):
        return f"weekly-report-{report.week_start.isoformat()}.csv"
    if isinstance(report, MonthlyReport):
        return f"monthly-report-{report.year:04d}-{report.month_number:02d}.csv"
    raise TypeError(f"Unsupported report type: {type(report).__name__}")


def format_hours(hours: float) -> str:
    """Format a rounded hour figure without trailing zeros.

    Example:
        >>> [format_hours(h) for h in (8.0, 8.5, 8.33)]
        ['8', '8.5', '8.33']
    """
    return f"{round_hours(hours):.2f}".rstrip("0").rstrip(".")
