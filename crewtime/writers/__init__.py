"""Writers module for exporting reports.

This module renders built reports as CSV for spreadsheet download.
"""

from crewtime.writers.csv_report_writer import CsvReportWriter, suggested_filename

__all__ = ["CsvReportWriter", "suggested_filename"]
