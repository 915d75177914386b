"""Unit tests for the report builder."""

import datetime as dt
from unittest.mock import Mock, patch

import pytest

from crewtime.aggregators.hours_aggregator import aggregate_hours
from crewtime.exceptions import DataIntegrityError, UpstreamFetchError, ValidationError
from crewtime.readers.entry_source import EntrySource, InMemoryEntrySource
from crewtime.reports.report_builder import ReportBuilder

UTC = dt.timezone.utc


@pytest.fixture
def settings(test_config):
    """Default report settings."""
    return test_config


def build(entries, settings, **overrides):
    """Report builder over an in-memory source."""
    if overrides:
        settings = settings.model_copy(update=overrides)
    return ReportBuilder(InMemoryEntrySource(entries), settings)


class TestDailyReport:
    """Test daily reports."""

    def test_empty_day(self, settings):
        """Test a day without entries is a valid empty report."""
        report = build([], settings).daily("2024-01-10")

        assert report.date == dt.date(2024, 1, 10)
        assert report.total_hours == 0.0
        assert report.employees == []
        assert report.job_sites == []

    def test_totals(self, make_entry, settings):
        """Test a day with two employees at two sites."""
        entries = [
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 12, 20)),
            make_entry((2024, 1, 10, 13, 0), (2024, 1, 10, 17, 0), job_site_id="site-2",
                       job_site_name="Depot"),
            make_entry((2024, 1, 10, 7, 0), (2024, 1, 10, 15, 0), employee_id="emp-2",
                       employee_name="Ben Okafor"),
            make_entry((2024, 1, 11, 8, 0), (2024, 1, 11, 9, 0)),  # next day
        ]
        report = build(entries, settings).daily("2024-01-10")

        assert report.total_hours == 16.33
        assert [(e.employee_id, e.hours_worked) for e in report.employees] == [
            ("emp-1", 8.33),
            ("emp-2", 8.0),
        ]
        assert [(s.job_site_id, s.hours) for s in report.employees[0].job_sites] == [
            ("site-1", 4.33),
            ("site-2", 4.0),
        ]
        assert [(s.job_site_id, s.total_hours) for s in report.job_sites] == [
            ("site-1", 12.33),
            ("site-2", 4.0),
        ]
        assert len(report.entries) == 3

    def test_overnight_shift_counted_on_clock_in_day(self, make_entry, settings):
        """Test a shift crossing midnight belongs entirely to its clock-in day."""
        entries = [make_entry((2024, 1, 10, 22, 0), (2024, 1, 11, 6, 0))]
        builder = build(entries, settings)

        assert builder.daily("2024-01-10").total_hours == 8.0
        assert builder.daily("2024-01-11").total_hours == 0.0

    def test_employee_filter(self, make_entry, settings):
        """Test restricting the report to one employee."""
        entries = [
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 9, 0), employee_id="emp-1"),
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 10, 0), employee_id="emp-2"),
        ]
        report = build(entries, settings).daily("2024-01-10", employee_id="emp-2")

        assert report.total_hours == 2.0
        assert [e.employee_id for e in report.employees] == ["emp-2"]


class TestWeeklyReport:
    """Test weekly reports."""

    def test_two_shifts(self, week_entries, settings):
        """Test 8.5 and 12 hour shifts in the week of 2024-01-08."""
        report = build(week_entries, settings).weekly("2024-01-10")

        assert report.week_start == dt.date(2024, 1, 8)
        assert report.week_end == dt.date(2024, 1, 13)
        assert report.total_hours == 20.5
        (employee,) = report.employees
        assert employee.regular_hours == 20.5
        assert employee.overtime_hours == 0.0
        assert employee.has_overtime is False
        assert [s.job_site_name for s in employee.job_sites] == ["Harbor Tower", "Depot"]

    def test_overtime(self, make_entry, settings):
        """Test five 9 hour shifts give 40 regular and 5 overtime hours."""
        entries = [
            make_entry((2024, 1, day, 7, 0), (2024, 1, day, 16, 0)) for day in range(8, 13)
        ]
        (employee,) = build(entries, settings).weekly("2024-01-08").employees

        assert employee.total_hours == 45.0
        assert employee.regular_hours == 40.0
        assert employee.overtime_hours == 5.0
        assert employee.has_overtime is True

    def test_exactly_forty_hours(self, make_entry, settings):
        """Test exactly 40 hours is not overtime."""
        entries = [
            make_entry((2024, 1, day, 8, 0), (2024, 1, day, 16, 0)) for day in range(8, 13)
        ]
        (employee,) = build(entries, settings).weekly("2024-01-08").employees
        assert employee.overtime_hours == 0.0
        assert employee.has_overtime is False

    def test_custom_threshold(self, make_entry, settings):
        """Test the configured overtime threshold is used."""
        entries = [make_entry((2024, 1, 8, 0, 0), (2024, 1, 9, 12, 0))]
        (employee,) = build(
            entries, settings, overtime_threshold_hours=30.0
        ).weekly("2024-01-08").employees
        assert employee.overtime_hours == 6.0

    def test_sunday_and_next_monday_excluded(self, make_entry, settings):
        """Test the week runs Monday to Saturday."""
        entries = [
            make_entry((2024, 1, 13, 8, 0), (2024, 1, 13, 10, 0)),  # Saturday
            make_entry((2024, 1, 14, 8, 0), (2024, 1, 14, 10, 0)),  # Sunday
            make_entry((2024, 1, 15, 8, 0), (2024, 1, 15, 10, 0)),  # Monday
        ]
        assert build(entries, settings).weekly("2024-01-13").total_hours == 2.0

    def test_same_name_employees_kept_apart(self, make_entry, settings):
        """Test two employees sharing a name get separate rows."""
        entries = [
            make_entry((2024, 1, 8, 8, 0), (2024, 1, 8, 10, 0), employee_id="emp-1",
                       employee_name="Sam Lee"),
            make_entry((2024, 1, 8, 8, 0), (2024, 1, 8, 11, 0), employee_id="emp-2",
                       employee_name="Sam Lee"),
        ]
        report = build(entries, settings).weekly("2024-01-08")
        assert [(e.employee_id, e.total_hours) for e in report.employees] == [
            ("emp-1", 2.0),
            ("emp-2", 3.0),
        ]


class TestMonthlyReport:
    """Test monthly reports."""

    def test_last_day_of_month_included(self, make_entry, settings):
        """Test an entry late on the last day of the month is counted."""
        entries = [make_entry((2024, 1, 31, 20, 0), (2024, 1, 31, 23, 0))]
        report = build(entries, settings).monthly(2024, 1)

        assert report.month == "January"
        assert report.year == 2024
        assert report.total_hours == 3.0

    def test_pay_period_breakdown(self, make_entry, settings):
        """Test periods are keyed by Monday and partial periods are flagged."""
        entries = [
            make_entry((2024, 1, 3, 8, 0), (2024, 1, 3, 16, 0)),  # period of Jan 1
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 12, 0)),  # period of Jan 8
            make_entry((2024, 1, 14, 8, 0), (2024, 1, 14, 10, 0)),  # Sunday, Jan 8
            make_entry((2024, 1, 31, 8, 0), (2024, 1, 31, 9, 0)),  # period of Jan 29
            make_entry((2024, 2, 1, 8, 0), (2024, 2, 1, 9, 0)),  # February
        ]
        report = build(entries, settings).monthly(2024, 1)

        assert [
            (p.period_start, p.period_end, p.total_hours, p.is_partial)
            for p in report.pay_periods
        ] == [
            (dt.date(2024, 1, 1), dt.date(2024, 1, 6), 8.0, False),
            (dt.date(2024, 1, 8), dt.date(2024, 1, 13), 6.0, False),
            (dt.date(2024, 1, 29), dt.date(2024, 2, 3), 1.0, True),
        ]
        assert report.total_hours == 15.0

    def test_period_overtime_against_period_only(self, make_entry, settings):
        """Test each pay period applies the threshold to its own hours."""
        entries = [
            make_entry((2024, 1, 8, 0, 0), (2024, 1, 10, 0, 0)),  # 48h
            make_entry((2024, 1, 15, 8, 0), (2024, 1, 15, 18, 0)),  # 10h
        ]
        report = build(entries, settings).monthly(2024, 1)

        first = report.find_pay_period(dt.date(2024, 1, 8)).employees[0]
        second = report.find_pay_period(dt.date(2024, 1, 15)).employees[0]
        assert (first.regular_hours, first.overtime_hours) == (40.0, 8.0)
        assert (second.regular_hours, second.overtime_hours) == (10.0, 0.0)

    def test_month_aggregate_policy(self, make_entry, settings):
        """Test the default policy applies the threshold to the month total."""
        entries = [
            make_entry((2024, 1, d, 6, 0), (2024, 1, d, 20, 0)) for d in (8, 9, 15, 16)
        ]
        (employee,) = build(entries, settings).monthly(2024, 1).employees

        assert employee.total_hours == 56.0
        assert employee.regular_hours == 40.0
        assert employee.overtime_hours == 16.0

    def test_sum_of_periods_policy(self, make_entry, settings):
        """Test the alternative policy sums per-period overtime."""
        entries = [
            make_entry((2024, 1, d, 6, 0), (2024, 1, d, 20, 0)) for d in (8, 9, 15, 16)
        ]
        (employee,) = build(
            entries, settings, monthly_overtime_policy="sum_of_periods"
        ).monthly(2024, 1).employees

        assert employee.total_hours == 56.0
        assert employee.overtime_hours == 0.0
        assert employee.has_overtime is False

    def test_single_aggregation_pass(self, make_entry, settings):
        """Test the month and its pay periods come from one aggregation."""
        entries = [
            make_entry((2024, 1, 3, 8, 0), (2024, 1, 3, 16, 0)),
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 12, 0)),
            make_entry((2024, 1, 17, 8, 0), (2024, 1, 17, 10, 0)),
        ]
        with patch(
            "crewtime.reports.report_builder.aggregate_hours", wraps=aggregate_hours
        ) as aggregate:
            report = build(entries, settings).monthly(2024, 1)

        aggregate.assert_called_once()
        assert aggregate.call_args.kwargs["by_pay_period"] is True
        assert [p.total_hours for p in report.pay_periods] == [8.0, 4.0, 2.0]

    def test_period_job_sites(self, make_entry, settings):
        """Test each pay period lists its own job sites and their employees."""
        entries = [
            make_entry((2024, 1, 8, 8, 0), (2024, 1, 8, 16, 0)),
            make_entry((2024, 1, 15, 8, 0), (2024, 1, 15, 12, 0), employee_id="emp-2",
                       employee_name="Bo Lund", job_site_id="site-2", job_site_name="Depot"),
        ]
        report = build(entries, settings).monthly(2024, 1)

        first = report.find_pay_period(dt.date(2024, 1, 8))
        second = report.find_pay_period(dt.date(2024, 1, 15))
        assert [(s.job_site_name, s.total_hours) for s in first.job_sites] == [
            ("Harbor Tower", 8.0)
        ]
        assert [e.employee_name for e in second.job_sites[0].employees] == ["Bo Lund"]
        assert [e.employee_id for e in second.employees] == ["emp-2"]

    def test_empty_month(self, settings):
        """Test a month without entries."""
        report = build([], settings).monthly("2024", "2")
        assert report.month == "February"
        assert report.pay_periods == []
        assert report.total_hours == 0.0


class TestErrorHandling:
    """Test validation, integrity and upstream failures."""

    def test_validation_before_fetch(self, settings):
        """Test malformed parameters never reach the source."""
        source = Mock(spec=EntrySource)
        builder = ReportBuilder(source, settings)

        with pytest.raises(ValidationError):
            builder.daily("2024-13-01")
        with pytest.raises(ValidationError):
            builder.weekly("01/08/2024")
        with pytest.raises(ValidationError):
            builder.monthly(2024, 13)
        with pytest.raises(ValidationError):
            builder.daily("2024-01-10", employee_id="emp 1")

        source.fetch_closed_entries.assert_not_called()
        source.fetch_entries.assert_not_called()

    def test_fetches_once_with_window(self, settings):
        """Test the source is asked once for the report window."""
        source = Mock(spec=EntrySource)
        source.fetch_closed_entries.return_value = []
        ReportBuilder(source, settings).weekly("2024-01-10", employee_id="emp-1")

        source.fetch_closed_entries.assert_called_once_with(
            dt.datetime(2024, 1, 8, tzinfo=UTC),
            dt.datetime(2024, 1, 14, tzinfo=UTC),
            "emp-1",
        )

    def test_refilters_source_results(self, make_entry, settings):
        """Test entries a source returns outside the request are dropped."""
        source = Mock(spec=EntrySource)
        source.fetch_closed_entries.return_value = [
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 9, 0)),
            make_entry((2024, 1, 11, 8, 0), (2024, 1, 11, 9, 0)),
            make_entry((2024, 1, 10, 8, 0), None),
        ]
        assert ReportBuilder(source, settings).daily("2024-01-10").total_hours == 1.0

    def test_upstream_error_propagates(self, settings):
        """Test source failures are raised unchanged."""
        error = UpstreamFetchError("store down")
        source = Mock(spec=EntrySource)
        source.fetch_closed_entries.side_effect = error

        with pytest.raises(UpstreamFetchError) as exc_info:
            ReportBuilder(source, settings).daily("2024-01-10")
        assert exc_info.value is error

    def test_invalid_entry_skipped(self, make_entry, settings):
        """Test the skip policy leaves the invalid entry out."""
        entries = [
            make_entry((2024, 1, 10, 8, 0), (2024, 1, 10, 9, 0)),
            make_entry((2024, 1, 10, 12, 0), (2024, 1, 10, 11, 0)),
        ]
        assert build(entries, settings).daily("2024-01-10").total_hours == 1.0

    def test_invalid_entry_fails_report(self, make_entry, settings):
        """Test the fail policy rejects the report."""
        entries = [make_entry((2024, 1, 10, 12, 0), (2024, 1, 10, 11, 0))]
        with pytest.raises(DataIntegrityError):
            build(entries, settings, invalid_entry_policy="fail").daily("2024-01-10")

    def test_uses_global_config_by_default(self, mock_env):
        """Test settings fall back to the global configuration."""
        builder = ReportBuilder(InMemoryEntrySource())
        assert builder.threshold == 40.0
