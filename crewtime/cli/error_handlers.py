"""Error handling for CLI commands.

Maps report engine errors to exit codes and coloured messages:

- 1: configuration (missing or invalid settings)
- 2: upstream (the time entry store could not be read)
- 3: validation (malformed report parameters)
- 4: data integrity (invalid entry under the ``fail`` policy)
- 130: cancelled by the user
- 255: unexpected
"""

import sys
import traceback

import click
from pydantic import ValidationError as SettingsValidationError

from crewtime.cli.utils.formatters import format_error, format_warning
from crewtime.exceptions import (
    CrewTimeError,
    DataIntegrityError,
    UpstreamFetchError,
    ValidationError,
)

EXIT_CONFIGURATION = 1
EXIT_UPSTREAM = 2
EXIT_VALIDATION = 3
EXIT_DATA_INTEGRITY = 4
EXIT_CANCELLED = 130
EXIT_UNEXPECTED = 255


class ConfigurationError(CrewTimeError):
    """Error related to configuration issues."""

    pass


def _echo_error(title: str, error: CrewTimeError) -> None:
    click.echo(format_error(f"{title}: {error.message}"), err=True)
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"), err=True)


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code for the error type
    """
    if isinstance(error, ValidationError):
        _echo_error("Invalid Parameters", error)
        return EXIT_VALIDATION

    elif isinstance(error, DataIntegrityError):
        _echo_error("Data Integrity Error", error)
        click.echo(
            format_warning(
                "Hint: Fix the entry in the time entry store, or set "
                "INVALID_ENTRY_POLICY=skip to leave invalid entries out"
            ),
            err=True,
        )
        return EXIT_DATA_INTEGRITY

    elif isinstance(error, UpstreamFetchError):
        _echo_error("Fetch Error", error)
        return EXIT_UPSTREAM

    elif isinstance(error, ConfigurationError):
        _echo_error("Configuration Error", error)
        return EXIT_CONFIGURATION

    # Settings failed to load from the environment or .env file
    elif isinstance(error, SettingsValidationError):
        click.echo(format_error("Configuration Error: invalid settings"), err=True)
        click.echo(str(error), err=True)
        click.echo(format_warning("Hint: Check the values in your .env file"), err=True)
        return EXIT_CONFIGURATION

    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"), err=True)
        return EXIT_CANCELLED

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"), err=True)
        click.echo(str(error), err=True)

        if debug:
            click.echo("\nFull stack trace:", err=True)
            click.echo(traceback.format_exc(), err=True)
        else:
            click.echo(
                format_warning("\nRun with --debug flag for full stack trace"), err=True
            )

        return EXIT_UNEXPECTED


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager that exits with the mapped exit code on error

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, SystemExit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False

    return ErrorHandler(debug)
