"""Services for talking to the crew app backend."""

from crewtime.services.crew_api_client import CrewApiClient
from crewtime.services.retry_handler import (
    RetryExhaustedException,
    RetryHandler,
    RetryStats,
    is_transient_error,
)

__all__ = [
    "CrewApiClient",
    "RetryExhaustedException",
    "RetryHandler",
    "RetryStats",
    "is_transient_error",
]
