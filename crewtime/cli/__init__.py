"""Crew time CLI.

This module provides a command-line interface for the report engine.
It includes commands for generating hour reports and showing live hours.
"""

import click

from crewtime import __version__
from crewtime.cli.commands.generate import generate_report
from crewtime.cli.commands.live import live_hours


@click.group(help="Crew time CLI - Hour reports for field crews")
@click.version_option(version=__version__)
def cli():
    """Crew time CLI main entry point."""
    pass


# Register commands
cli.add_command(generate_report)
cli.add_command(live_hours)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
