"""CLI utilities for formatting and progress tracking."""

from crewtime.cli.utils.formatters import (
    format_error,
    format_hours,
    format_info,
    format_success,
    format_table,
    format_warning,
)
from crewtime.cli.utils.progress import ProgressTracker

__all__ = [
    "format_error",
    "format_hours",
    "format_info",
    "format_success",
    "format_table",
    "format_warning",
    "ProgressTracker",
]
