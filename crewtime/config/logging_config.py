"""Centralized logging configuration for the report engine.

Log lines go to stderr (and optionally a rotating file) so report output
printed on stdout stays machine-readable.
"""

import datetime as dt
import json
import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from crewtime.config.settings import CrewTimeConfig

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
FORMATS = ("standard", "json")

STANDARD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

# Anything on a record beyond these came from extra={} or the report context
_BASE_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

# HTTP libraries used by the crew API client; only shown at DEBUG
_HTTP_LOGGERS = ("urllib3", "requests")


class JSONFormatter(logging.Formatter):
    """Formats each record as one JSON object per line.

    Report context fields (``report_type``, ``correlation_id``, request
    parameters) become top-level keys next to the message.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _BASE_RECORD_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Report dates and windows are not JSON types
        return json.dumps(payload, default=str)


@dataclass
class LoggingConfig:
    """Where and how log records are written.

    Attributes:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_format: 'standard' text lines or 'json'
        log_file: Path of the rotating log file
        enable_console: Write to stderr
        enable_file: Write to ``log_file``
        max_file_size: Bytes before the log file is rotated
        backup_count: Rotated files kept
    """

    log_level: str = "INFO"
    log_format: str = "standard"
    log_file: Optional[str] = None
    enable_console: bool = True
    enable_file: bool = False
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. Must be one of {', '.join(LEVELS)}"
            )
        if self.log_format not in FORMATS:
            raise ValueError(
                f"Invalid log format: {self.log_format}. Must be one of {', '.join(FORMATS)}"
            )
        if self.enable_file and not self.log_file:
            raise ValueError("log_file must be specified when enable_file is True")

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Read LOG_LEVEL, LOG_FORMAT, LOG_FILE, LOG_CONSOLE, LOG_FILE_ENABLED,
        LOG_MAX_FILE_SIZE and LOG_BACKUP_COUNT from the environment."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            log_file=os.getenv("LOG_FILE"),
            enable_console=_env_flag("LOG_CONSOLE", True),
            enable_file=_env_flag("LOG_FILE_ENABLED", False),
            max_file_size=int(os.getenv("LOG_MAX_FILE_SIZE", str(cls.max_file_size))),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", str(cls.backup_count))),
        )

    @classmethod
    def from_settings(cls, settings: "CrewTimeConfig") -> "LoggingConfig":
        """Environment-based configuration with the level taken from the settings.

        DEBUG wins when the settings have debug turned on.
        """
        config = cls.from_env()
        config.log_level = "DEBUG" if settings.debug else settings.log_level
        return config


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


def _build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if config.enable_console:
        handlers.append(logging.StreamHandler())
    if config.enable_file and config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.log_file,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )
    return handlers


def _clear_root_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def configure_logging(config: LoggingConfig) -> None:
    """Install the configured handlers on the root logger.

    Handlers from an earlier call are closed and replaced, so commands can
    call this once per invocation.
    """
    from crewtime.utils.logging_utils import _ContextFilter

    root = logging.getLogger()
    _clear_root_handlers(root)

    level = getattr(logging, config.log_level)
    root.setLevel(level)

    if config.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    context_filter = _ContextFilter()
    for handler in _build_handlers(config):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

    http_level = logging.DEBUG if config.log_level == "DEBUG" else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)


def reset_logging() -> None:
    """Drop every root handler and restore the WARNING level. Used by tests."""
    root = logging.getLogger()
    _clear_root_handlers(root)
    root.setLevel(logging.WARNING)
