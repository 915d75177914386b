"""Live hours command."""

import datetime as dt
import json
from typing import Optional

import click

from crewtime.calculators.live_hours_calculator import (
    calculate_live_hours,
    total_live_hours,
)
from crewtime.calculators.pay_period_calculator import today_window
from crewtime.cli.error_handlers import with_error_handling
from crewtime.cli.utils.formatters import format_hours, format_info, format_table
from crewtime.cli.utils.setup import load_settings, resolve_source
from crewtime.exceptions import ValidationError
from crewtime.models.time_entry import ensure_utc


def parse_now(value: Optional[str]) -> dt.datetime:
    """Parse an ISO 8601 instant, defaulting to the current UTC time.

    Naive values are taken as UTC.

    Raises:
        ValidationError: If the value is not an ISO 8601 date-time
    """
    if value is None:
        return dt.datetime.now(dt.timezone.utc)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(dt.datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(
            f"Invalid parameters: 'now' must be an ISO 8601 date-time, got {value!r}",
            recovery_hint="Example: --now 2024-01-10T14:30:00Z",
        )


@click.command(name="live-hours")
@click.option(
    "--source",
    type=click.Path(dir_okay=False),
    default=None,
    help="Time entry CSV export to read (defaults to the configured source).",
)
@click.option(
    "--now",
    type=str,
    default=None,
    help="Current instant as ISO 8601 (defaults to the system clock).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("--debug", is_flag=True, help="Show debug logs and full stack traces.")
def live_hours(source: Optional[str], now: Optional[str], output_format: str, debug: bool):
    """Show hours worked today per employee, counting open shifts up to now.

    Example:
        crewtime live-hours
        crewtime live-hours --source entries.csv --now 2024-01-10T14:30:00Z
    """
    with with_error_handling(debug):
        instant = parse_now(now)
        settings = load_settings(debug)
        entry_source = resolve_source(settings, source)

        window = today_window(instant)
        entries = entry_source.fetch_entries(window.start, window.end)
        rows = calculate_live_hours(entries, instant)
        total = total_live_hours(rows)

        if output_format.lower() == "json":
            payload = {
                "asOf": instant.isoformat(),
                "totalHours": total,
                "employees": [row.to_json_dict() for row in rows],
            }
            click.echo(json.dumps(payload, indent=2))
            return

        click.echo(format_info(f"Hours today ({window.first_day.isoformat()} UTC)"))
        if not rows:
            click.echo("No time entries today.")
            return

        click.echo(
            format_table(
                ["Employee", "Status", "Job Site", "Hours Today"],
                [
                    [
                        row.employee_name,
                        "Active" if row.is_active else "Clocked out",
                        row.job_site_name or "",
                        format_hours(row.hours_today),
                    ]
                    for row in rows
                ],
            )
        )
        click.echo(f"Crew total: {format_hours(total)}")
