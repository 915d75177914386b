"""HTTP entry source reading time entries from the crew app backend.

The backend exposes time entries as JSON at ``GET /api/time-entries``.
Transient failures are retried here, in the storage layer, so the report
builder never retries.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from crewtime.config.settings import CrewTimeConfig
from crewtime.exceptions import UpstreamFetchError
from crewtime.models.time_entry import TimeEntry, ensure_utc
from crewtime.readers.entry_source import EntrySource, select_entries
from crewtime.services.retry_handler import RetryExhaustedException, RetryHandler
from crewtime.utils.logging_utils import sanitize_sensitive_data

logger = logging.getLogger(__name__)

TIME_ENTRIES_PATH = "/api/time-entries"

# Wire names accepted for each entry; anything else in a payload item is dropped
_TIME_ENTRY_KEYS = {
    field.alias or name for name, field in TimeEntry.model_fields.items()
}


class CrewApiClient(EntrySource):
    """Entry source backed by the crew app's REST API.

    Query parameters sent:
    - ``from`` / ``to``: ISO 8601 UTC bounds of the clock-in window
      (inclusive / exclusive)
    - ``employeeId``: optional employee filter
    - ``closed``: ``true`` to ask only for entries with a clock-out

    The response body must be a JSON array of entries with the camelCase
    fields of TimeEntry. Invalid items are logged and skipped.

    Attributes:
        base_url: Backend base URL without trailing slash
        timeout: Per-request timeout in seconds

    Example:
        >>> client = CrewApiClient.from_config(get_config())
        >>> entries = client.fetch_closed_entries(window.start, window.end)
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
        retry_handler: Optional[RetryHandler] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Backend base URL
            headers: Extra HTTP headers (e.g. Authorization)
            timeout: Per-request timeout in seconds
            retry_handler: Retry policy for transient failures
            session: HTTP session to reuse (a new one by default)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_handler = retry_handler or RetryHandler()
        self._session = session or requests.Session()
        if headers:
            self._session.headers.update(headers)

    @classmethod
    def from_config(cls, settings: CrewTimeConfig) -> "CrewApiClient":
        """Build a client from application settings.

        Raises:
            UpstreamFetchError: If no API base URL is configured
        """
        if not settings.crew_api_base_url:
            raise UpstreamFetchError(
                "No crew API base URL configured",
                recovery_hint="Set CREW_API_BASE_URL in the .env file",
            )
        return cls(
            base_url=settings.crew_api_base_url,
            headers=settings.get_api_headers(),
            timeout=settings.request_timeout,
            retry_handler=RetryHandler(
                max_retries=settings.max_retries, base_delay=settings.retry_delay
            ),
        )

    def fetch_entries(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str] = None,
    ) -> List[TimeEntry]:
        return self._fetch(window_start, window_end, employee_id, closed_only=False)

    def fetch_closed_entries(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str] = None,
    ) -> List[TimeEntry]:
        entries = self._fetch(window_start, window_end, employee_id, closed_only=True)
        return select_entries(
            entries, window_start, window_end, employee_id, closed_only=True
        )

    def _fetch(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str],
        closed_only: bool,
    ) -> List[TimeEntry]:
        params: Dict[str, str] = {
            "from": ensure_utc(window_start).isoformat(),
            "to": ensure_utc(window_end).isoformat(),
        }
        if employee_id:
            params["employeeId"] = employee_id
        if closed_only:
            params["closed"] = "true"

        url = f"{self.base_url}{TIME_ENTRIES_PATH}"
        logger.info(f"Fetching time entries from {url}")
        logger.debug(
            f"Request headers: {sanitize_sensitive_data(dict(self._session.headers))}, "
            f"params: {params}"
        )

        try:
            payload = self.retry_handler.call(self._get_json, url, params)
        except RetryExhaustedException as e:
            raise UpstreamFetchError(
                f"Crew API unavailable after retries: {e}",
                recovery_hint="Try again in a few minutes",
            ) from e
        except ValueError as e:
            raise UpstreamFetchError(f"Crew API returned invalid JSON: {e}") from e
        except requests.exceptions.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.error(f"Crew API request failed (status {status}): {e}")
            raise UpstreamFetchError(f"Crew API request failed: {e}") from e

        if not isinstance(payload, list):
            raise UpstreamFetchError(
                f"Crew API returned {type(payload).__name__}, expected a list of entries"
            )

        entries = [entry for entry in map(self._parse_item, payload) if entry]
        logger.info(f"Received {len(entries)} of {len(payload)} time entries")
        return entries

    def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        response = self._session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _parse_item(self, item: Any) -> Optional[TimeEntry]:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object time entry item: {item!r}")
            return None
        try:
            return TimeEntry.model_validate(
                {k: v for k, v in item.items() if k in _TIME_ENTRY_KEYS}
            )
        except ValidationError as e:
            logger.warning(f"Skipping invalid time entry {item.get('id')}: {e}")
            return None
