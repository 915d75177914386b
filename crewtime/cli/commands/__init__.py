"""CLI commands."""

from crewtime.cli.commands.generate import generate_report
from crewtime.cli.commands.live import live_hours

__all__ = ["generate_report", "live_hours"]
