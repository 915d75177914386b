"""Unit tests for live hours-today figures."""

import datetime as dt

from crewtime.calculators.live_hours_calculator import (
    calculate_live_hours,
    total_live_hours,
)

UTC = dt.timezone.utc
NOW = dt.datetime(2024, 1, 10, 14, 30, tzinfo=UTC)


class TestCalculateLiveHours:
    """Test hours today per employee."""

    def test_open_entry_counts_up_to_now(self, make_entry):
        """Test that an open entry counts from clock-in to now."""
        rows = calculate_live_hours([make_entry((2024, 1, 10, 8, 0), None)], NOW)

        assert len(rows) == 1
        assert rows[0].is_active is True
        assert rows[0].hours_today == 6.5
        assert rows[0].job_site_name == "Harbor Tower"
        assert rows[0].clock_in_time == dt.datetime(2024, 1, 10, 8, 0, tzinfo=UTC)

    def test_closed_and_open_entries_add_up(self, make_entry):
        """Test a morning shift plus an open afternoon shift."""
        entries = [
            make_entry((2024, 1, 10, 6, 0), (2024, 1, 10, 10, 0)),
            make_entry((2024, 1, 10, 12, 0), None, job_site_id="site-2", job_site_name="Depot"),
        ]
        rows = calculate_live_hours(entries, NOW)

        assert rows[0].hours_today == 6.5
        assert rows[0].job_site_id == "site-2"

    def test_clocked_out_employee_is_inactive(self, make_entry):
        """Test that an employee with only closed entries is not active."""
        rows = calculate_live_hours(
            [make_entry((2024, 1, 10, 6, 0), (2024, 1, 10, 10, 0))], NOW
        )
        assert rows[0].is_active is False
        assert rows[0].job_site_id is None
        assert rows[0].clock_in_time is None

    def test_entries_from_other_days_ignored(self, make_entry):
        """Test that yesterday's entries are left out."""
        rows = calculate_live_hours(
            [make_entry((2024, 1, 9, 8, 0), (2024, 1, 9, 16, 0))], NOW
        )
        assert rows == []

    def test_clock_in_after_now_counts_zero(self, make_entry):
        """Test that a clock-in ahead of now does not go negative."""
        rows = calculate_live_hours([make_entry((2024, 1, 10, 15, 0), None)], NOW)
        assert rows[0].hours_today == 0.0

    def test_invalid_closed_entry_ignored(self, make_entry, caplog):
        """Test that a reversed entry is ignored with a warning."""
        entries = [
            make_entry((2024, 1, 10, 10, 0), (2024, 1, 10, 9, 0)),
            make_entry((2024, 1, 10, 11, 0), (2024, 1, 10, 12, 0)),
        ]
        rows = calculate_live_hours(entries, NOW)

        assert rows[0].hours_today == 1.0
        assert "Ignoring entry" in caplog.text

    def test_employees_kept_apart(self, make_entry):
        """Test two employees with the same name get separate rows."""
        entries = [
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 9, 0), employee_id="emp-1"),
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 10, 0), employee_id="emp-2"),
        ]
        rows = calculate_live_hours(entries, NOW)
        assert [(r.employee_id, r.hours_today) for r in rows] == [("emp-1", 1.0), ("emp-2", 2.0)]


class TestTotalLiveHours:
    """Test the crew total."""

    def test_sums_rows(self, make_entry):
        """Test that the total is the sum of per-employee hours."""
        entries = [
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 9, 15), employee_id="emp-1"),
            make_entry((2024, 1, 10, 8, 0), None, employee_id="emp-2"),
        ]
        assert total_live_hours(calculate_live_hours(entries, NOW)) == 7.75

    def test_empty(self):
        """Test that no rows give zero."""
        assert total_live_hours([]) == 0.0
