"""Output formatting utilities for CLI."""

from typing import List, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def format_hours(hours: float) -> str:
    """Format an hour figure with two decimals, e.g. '8.50h'."""
    return f"{hours:.2f}h"


def format_table(
    headers: List[str], rows: Sequence[Sequence[object]], max_width: int = 40
) -> str:
    """Format data as a plain text table.

    Args:
        headers: Column headers
        rows: Data rows (each a sequence of cell values)
        max_width: Maximum width of a column; longer cells are truncated

    Returns:
        Formatted table, or an empty string when there are no headers

    Example:
        >>> print(format_table(["Employee", "Hours"], [["Ana Silva", "8.50h"]]))
        +-----------+-------+
        | Employee  | Hours |
        +-----------+-------+
        | Ana Silva | 8.50h |
        +-----------+-------+
    """
    if not headers:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [min(w, max_width) for w in widths]

    def _line(cells: Sequence[object]) -> str:
        padded = [
            f" {str(cell)[: widths[i]]:<{widths[i]}} "
            for i, cell in enumerate(cells[: len(widths)])
        ]
        return "|" + "|".join(padded) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, _line(headers), separator]
    if rows:
        lines.extend(_line(row) for row in rows)
        lines.append(separator)
    return "\n".join(lines)
