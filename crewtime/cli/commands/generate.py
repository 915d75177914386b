"""Generate report command."""

import json
import time
from typing import Optional

import click

from crewtime.cli.error_handlers import with_error_handling
from crewtime.cli.utils.formatters import format_info, format_success
from crewtime.cli.utils.progress import ProgressTracker
from crewtime.cli.utils.setup import load_settings, resolve_source
from crewtime.reports.report_builder import ReportBuilder
from crewtime.writers.csv_report_writer import CsvReportWriter, suggested_filename


def render_report(report, output_format: str) -> str:
    """Render a built report as JSON or CSV text."""
    if output_format == "csv":
        return CsvReportWriter().render(report)
    return json.dumps(report.to_json_dict(), indent=2)


@click.command(name="generate-report")
@click.option(
    "--type",
    "report_type",
    required=True,
    type=click.Choice(["daily", "weekly", "monthly"], case_sensitive=False),
    help="Report type.",
)
@click.option("--date", "date", type=str, default=None, help="Day of a daily report (YYYY-MM-DD).")
@click.option(
    "--start-date",
    type=str,
    default=None,
    help="Any day of the week of a weekly report (YYYY-MM-DD).",
)
@click.option("--year", type=str, default=None, help="Year of a monthly report.")
@click.option("--month", type=str, default=None, help="Month (1-12) of a monthly report.")
@click.option("--employee", type=str, default=None, help="Filter by employee ID (optional).")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "csv"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, allow_dash=True),
    default=None,
    help="Write the report to this file instead of stdout. "
    "Pass '-' to use the suggested file name.",
)
@click.option(
    "--source",
    type=click.Path(dir_okay=False),
    default=None,
    help="Time entry CSV export to read (defaults to the configured source).",
)
@click.option("--debug", is_flag=True, help="Show debug logs and full stack traces.")
def generate_report(
    report_type: str,
    date: Optional[str],
    start_date: Optional[str],
    year: Optional[str],
    month: Optional[str],
    employee: Optional[str],
    output_format: str,
    output: Optional[str],
    source: Optional[str],
    debug: bool,
):
    """Generate a daily, weekly or monthly hours report.

    Weekly reports cover the Monday-to-Saturday week containing
    --start-date. Monthly reports break the month down by pay period.

    Example:
        crewtime generate-report --type daily --date 2024-01-10
        crewtime generate-report --type weekly --start-date 2024-01-10 --format csv
        crewtime generate-report --type monthly --year 2024 --month 1 --output jan.json
    """
    start_time = time.time()

    with with_error_handling(debug):
        report_type = report_type.lower()
        output_format = output_format.lower()
        quiet = output is None
        tracker = ProgressTracker(
            ["Loading configuration", "Building report", "Writing output"], quiet=quiet
        )

        tracker.start_stage()
        settings = load_settings(debug)
        builder = ReportBuilder(resolve_source(settings, source), settings)
        tracker.advance()

        tracker.start_stage()
        if report_type == "daily":
            report = builder.daily(date, employee)
        elif report_type == "weekly":
            report = builder.weekly(start_date, employee)
        else:
            report = builder.monthly(year, month, employee)
        tracker.advance(f"Total hours: {report.total_hours}")

        if output is None:
            click.echo(render_report(report, output_format))
            return

        tracker.start_stage()
        if output == "-":
            output = suggested_filename(report)
            if output_format == "json":
                output = output[: -len(".csv")] + ".json"
        if output_format == "csv":
            CsvReportWriter().write(report, output)
        else:
            with open(output, "w", encoding="utf-8") as f:
                f.write(render_report(report, output_format))
        tracker.advance()

        duration = time.time() - start_time
        click.echo(format_success("Report generated successfully!"), err=True)
        click.echo(format_info(f"  File:     {output}"), err=True)
        click.echo(format_info(f"  Duration: {duration:.2f}s"), err=True)
