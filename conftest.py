"""
Global pytest configuration and fixtures.
"""
import datetime as dt
from typing import Dict, Optional

import pytest

from crewtime.config import CrewTimeConfig, reload_config
from crewtime.config.logging_config import reset_logging
from crewtime.models.time_entry import TimeEntry

UTC = dt.timezone.utc


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'ERROR',
        'OVERTIME_THRESHOLD_HOURS': '40',
        'MONTHLY_OVERTIME_POLICY': 'month_aggregate',
        'INVALID_ENTRY_POLICY': 'skip',
        'MAX_RETRIES': '0',
        'RETRY_DELAY': '0',
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    for key in ('ENTRIES_FILE', 'CREW_API_BASE_URL', 'CREW_API_TOKEN'):
        monkeypatch.delenv(key, raising=False)

    yield test_env_vars


@pytest.fixture
def test_config(mock_env) -> CrewTimeConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture(autouse=True)
def reset_global_state():
    """Clear the cached configuration and logging handlers around each test."""
    import crewtime.config.settings
    crewtime.config.settings._config = None

    yield

    crewtime.config.settings._config = None
    reset_logging()


@pytest.fixture
def make_entry():
    """Factory for time entries.

    Times are given as (year, month, day, hour, minute) tuples in UTC, or as
    datetimes. ``clock_out=None`` builds an open entry.
    """
    counter = {'n': 0}

    def _to_datetime(value) -> Optional[dt.datetime]:
        if value is None or isinstance(value, dt.datetime):
            return value
        return dt.datetime(*value, tzinfo=UTC)

    def _make(
        clock_in,
        clock_out,
        employee_id: str = 'emp-1',
        employee_name: str = 'Ana Silva',
        job_site_id: str = 'site-1',
        job_site_name: str = 'Harbor Tower',
        entry_id: Optional[str] = None,
    ) -> TimeEntry:
        counter['n'] += 1
        return TimeEntry(
            entry_id=entry_id or f"entry-{counter['n']}",
            employee_id=employee_id,
            employee_name=employee_name,
            job_site_id=job_site_id,
            job_site_name=job_site_name,
            clock_in_time=_to_datetime(clock_in),
            clock_out_time=_to_datetime(clock_out),
        )

    return _make


@pytest.fixture
def week_entries(make_entry):
    """Two shifts of one employee in the week of Monday 2024-01-08."""
    return [
        make_entry((2024, 1, 8, 8, 0), (2024, 1, 8, 16, 30)),
        make_entry((2024, 1, 10, 6, 0), (2024, 1, 10, 18, 0), job_site_id='site-2',
                   job_site_name='Depot'),
    ]


@pytest.fixture
def entries_csv(tmp_path):
    """Write a time entry CSV export and return its path."""
    def _write(rows, header='id,employeeId,employeeName,jobSiteId,jobSiteName,'
                            'clockInTime,clockOutTime,workDescription'):
        path = tmp_path / 'entries.csv'
        path.write_text(header + '\n' + ''.join(row + '\n' for row in rows), encoding='utf-8')
        return str(path)

    return _write


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an end-to-end test through the CLI"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
