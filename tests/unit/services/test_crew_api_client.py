"""Unit tests for the crew API entry source."""

import datetime as dt
from unittest.mock import Mock

import pytest
import requests

from crewtime.exceptions import UpstreamFetchError
from crewtime.services.crew_api_client import TIME_ENTRIES_PATH, CrewApiClient
from crewtime.services.retry_handler import RetryHandler

UTC = dt.timezone.utc
START = dt.datetime(2024, 1, 8, tzinfo=UTC)
END = dt.datetime(2024, 1, 14, tzinfo=UTC)


def api_entry(entry_id, clock_in, clock_out, employee_id="emp-1", **extra):
    """Build an entry as the backend serializes it."""
    item = {
        "id": entry_id,
        "employeeId": employee_id,
        "employeeName": "Ana Silva",
        "jobSiteId": "site-1",
        "jobSiteName": "Harbor Tower",
        "clockInTime": clock_in,
        "clockOutTime": clock_out,
    }
    item.update(extra)
    return item


class TestCrewApiClient:
    """Test fetching entries over HTTP."""

    @pytest.fixture
    def session(self):
        """Mock requests session returning an empty list."""
        session = Mock()
        session.headers = {}
        response = Mock()
        response.json.return_value = []
        session.get.return_value = response
        return session

    @pytest.fixture
    def client(self, session):
        """Client with no retry delay."""
        return CrewApiClient(
            "https://crew.example.com/",
            headers={"Authorization": "Bearer secret"},
            retry_handler=RetryHandler(max_retries=1, base_delay=0.0, sleep=Mock()),
            session=session,
        )

    def test_request_parameters(self, client, session):
        """Test URL, window bounds, employee filter and closed flag."""
        client.fetch_closed_entries(START, END, "emp-1")

        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == f"https://crew.example.com{TIME_ENTRIES_PATH}"
        assert params == {
            "from": "2024-01-08T00:00:00+00:00",
            "to": "2024-01-14T00:00:00+00:00",
            "employeeId": "emp-1",
            "closed": "true",
        }
        assert session.headers["Authorization"] == "Bearer secret"

    def test_parses_entries_and_filters_again(self, client, session):
        """Test open and out-of-window entries are dropped from closed fetches."""
        session.get.return_value.json.return_value = [
            api_entry("te-1", "2024-01-08T08:00:00Z", "2024-01-08T16:30:00Z"),
            api_entry("te-2", "2024-01-09T08:00:00Z", None),
            api_entry("te-3", "2024-01-15T08:00:00Z", "2024-01-15T09:00:00Z"),
        ]
        entries = client.fetch_closed_entries(START, END)
        assert [e.entry_id for e in entries] == ["te-1"]

    def test_fetch_entries_keeps_open(self, client, session):
        """Test fetch_entries returns open entries without the closed flag."""
        session.get.return_value.json.return_value = [
            api_entry("te-2", "2024-01-09T08:00:00Z", None),
        ]
        entries = client.fetch_entries(START, END)

        assert entries[0].is_open
        assert "closed" not in session.get.call_args.kwargs["params"]

    def test_unknown_fields_dropped(self, client, session):
        """Test extra backend fields do not fail validation."""
        session.get.return_value.json.return_value = [
            api_entry("te-1", "2024-01-08T08:00:00Z", "2024-01-08T09:00:00Z",
                      createdAt="2024-01-08T09:00:01Z"),
        ]
        assert len(client.fetch_closed_entries(START, END)) == 1

    def test_invalid_items_skipped(self, client, session, caplog):
        """Test that invalid items are logged and skipped."""
        session.get.return_value.json.return_value = [
            "garbage",
            api_entry("te-1", "yesterday", None),
            api_entry("te-2", "2024-01-08T08:00:00Z", "2024-01-08T09:00:00Z"),
        ]
        entries = client.fetch_closed_entries(START, END)

        assert [e.entry_id for e in entries] == ["te-2"]
        assert "te-1" in caplog.text

    def test_non_list_payload(self, client, session):
        """Test that an object payload is an upstream error."""
        session.get.return_value.json.return_value = {"error": "nope"}
        with pytest.raises(UpstreamFetchError, match="expected a list"):
            client.fetch_closed_entries(START, END)

    def test_invalid_json(self, client, session):
        """Test that an unparseable body is an upstream error."""
        session.get.return_value.json.side_effect = ValueError("Expecting value")
        with pytest.raises(UpstreamFetchError, match="invalid JSON"):
            client.fetch_closed_entries(START, END)

    def test_client_error_not_retried(self, client, session):
        """Test that a 401 fails on the first attempt."""
        session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "401", response=Mock(status_code=401)
        )
        with pytest.raises(UpstreamFetchError) as exc_info:
            client.fetch_closed_entries(START, END)

        assert session.get.call_count == 1
        assert isinstance(exc_info.value.__cause__, requests.exceptions.HTTPError)

    def test_retries_exhausted(self, client, session):
        """Test that persistent connection failures become an upstream error."""
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(UpstreamFetchError) as exc_info:
            client.fetch_closed_entries(START, END)

        assert session.get.call_count == 2
        assert exc_info.value.recovery_hint


class TestFromConfig:
    """Test building the client from settings."""

    def test_from_config(self, test_config):
        """Test base URL, token and retry settings are applied."""
        settings = test_config.model_copy(
            update={"crew_api_base_url": "https://crew.example.com", "crew_api_token": "tok"}
        )
        client = CrewApiClient.from_config(settings)

        assert client.base_url == "https://crew.example.com"
        assert client._session.headers["Authorization"] == "Bearer tok"
        assert client.retry_handler.max_retries == 0

    def test_missing_url(self, test_config):
        """Test that a missing base URL is reported with a hint."""
        with pytest.raises(UpstreamFetchError) as exc_info:
            CrewApiClient.from_config(test_config)
        assert "CREW_API_BASE_URL" in exc_info.value.recovery_hint
