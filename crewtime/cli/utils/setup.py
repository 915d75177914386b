"""Settings, logging and entry source setup shared by CLI commands."""

import logging
from typing import Optional

from crewtime.cli.error_handlers import ConfigurationError
from crewtime.config.logging_config import LoggingConfig, configure_logging
from crewtime.config.settings import CrewTimeConfig, get_config
from crewtime.readers.csv_entry_reader import CsvEntryReader
from crewtime.readers.entry_source import EntrySource
from crewtime.services.crew_api_client import CrewApiClient

logger = logging.getLogger(__name__)


def load_settings(debug: bool = False) -> CrewTimeConfig:
    """Load settings and configure logging from them.

    Args:
        debug: Force DEBUG logging regardless of LOG_LEVEL

    Returns:
        Loaded settings
    """
    settings = get_config()
    logging_config = LoggingConfig.from_settings(settings)
    if debug:
        logging_config.log_level = "DEBUG"
    configure_logging(logging_config)
    return settings


def resolve_source(settings: CrewTimeConfig, source_path: Optional[str] = None) -> EntrySource:
    """Pick the entry source for a command.

    Order of precedence:
    1. ``--source`` CSV export given on the command line
    2. ENTRIES_FILE from the settings
    3. The crew API at CREW_API_BASE_URL

    Raises:
        ConfigurationError: If no source is configured
    """
    path = source_path or settings.entries_file
    if path:
        logger.debug(f"Reading time entries from CSV export {path}")
        return CsvEntryReader(path)
    if settings.crew_api_base_url:
        logger.debug(f"Reading time entries from crew API {settings.crew_api_base_url}")
        return CrewApiClient.from_config(settings)
    raise ConfigurationError(
        "No time entry source configured",
        recovery_hint=(
            "Pass --source PATH, or set ENTRIES_FILE or CREW_API_BASE_URL in the .env file"
        ),
    )
