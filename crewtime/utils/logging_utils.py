"""Per-request log context and redaction helpers.

Fields entered with ``LogContext`` (or ``report_context`` for a report
request) are copied onto every record by ``_ContextFilter``, which
``configure_logging`` installs on each handler.
"""

import contextvars
import logging
import uuid
from typing import Any, Dict, Optional

_log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "crewtime_log_context", default={}
)

# Key fragments whose values are replaced before logging
SENSITIVE_FIELDS = ("password", "token", "api_key", "secret", "authorization", "cookie")

REDACTED = "***REDACTED***"


def generate_correlation_id() -> str:
    """Return a new correlation ID for one report request."""
    return str(uuid.uuid4())


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently attached to log records."""
    return dict(_log_context.get())


def get_correlation_id() -> Optional[str]:
    """Return the active correlation ID, or None outside a request."""
    return _log_context.get().get("correlation_id")


class LogContext:
    """
    Context manager attaching structured fields to log records.

    Contexts nest: inner fields are layered over the outer ones and the
    outer set is restored on exit.

    Example:
        with LogContext(report_type="weekly", employee_id="emp-1"):
            logger.info("Building report")
    """

    def __init__(self, **fields):
        self.fields = fields
        self._token: Optional[contextvars.Token] = None

    def __enter__(self):
        self._token = _log_context.set({**_log_context.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def report_context(report_type: str, **params) -> LogContext:
    """
    Build the log context for one report request.

    A correlation ID is generated unless one is already active, so a CLI
    command and the builder it calls log under the same ID. Parameters
    that are None are left out.

    Args:
        report_type: 'daily', 'weekly', 'monthly' or 'live'
        **params: Request parameters to attach

    Returns:
        LogContext ready to be entered
    """
    fields = {key: value for key, value in params.items() if value is not None}
    fields["report_type"] = report_type
    fields["correlation_id"] = get_correlation_id() or generate_correlation_id()
    return LogContext(**fields)


class _ContextFilter(logging.Filter):
    """Copies the active log context onto each record; never drops records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


def sanitize_sensitive_data(data: Any) -> Any:
    """
    Return a copy of ``data`` safe to log.

    Values under keys containing a sensitive fragment (case-insensitive)
    are replaced with ``***REDACTED***``; None stays None. Nested
    dictionaries are sanitized too and anything that is not a dictionary
    is returned unchanged.
    """
    if not isinstance(data, dict):
        return data

    sanitized = {}
    for key, value in data.items():
        if any(fragment in str(key).lower() for fragment in SENSITIVE_FIELDS):
            sanitized[key] = None if value is None else REDACTED
        else:
            sanitized[key] = sanitize_sensitive_data(value)
    return sanitized
