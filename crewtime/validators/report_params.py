"""Validation of report query parameters.

Each report type has a parameter model. Parsing happens before any time
entries are fetched, and failures are raised as
``crewtime.exceptions.ValidationError`` with a message naming the
offending parameter.
"""

import datetime as dt
import re
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from crewtime.exceptions import ValidationError
from crewtime.models.base import BaseDataModel

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_PATTERN = re.compile(r"^\s*\d+\s*$")
EMPLOYEE_ID_PATTERN = re.compile(r"^[^\s\x00-\x1f\x7f]+$")
MAX_EMPLOYEE_ID_LENGTH = 128

MIN_YEAR = 2000
MAX_YEAR = 2100


def _parse_iso_date(value: Any) -> dt.date:
    """Accept a date object or a strict YYYY-MM-DD string."""
    if isinstance(value, dt.datetime):
        raise ValueError("must be a calendar date (YYYY-MM-DD), not a timestamp")
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        raise ValueError(f"must use the YYYY-MM-DD format, got {value!r}")
    try:
        return dt.datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"is not a valid calendar date: {value!r}")


def _parse_integer(value: Any) -> int:
    """Accept an int or a string of digits. Booleans are rejected."""
    if isinstance(value, bool):
        raise ValueError(f"must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.match(value):
        return int(value)
    raise ValueError(f"must be an integer, got {value!r}")


class _ReportParams(BaseDataModel):
    """Parameters shared by every report type."""

    employee_id: Optional[str] = Field(None, alias="employeeId")

    @field_validator("employee_id", mode="before")
    @classmethod
    def validate_employee_id(cls, v: Any) -> Optional[str]:
        """Accept an opaque ID without whitespace or control characters.

        An empty string means "no filter".
        """
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(f"must be a string, got {type(v).__name__}")
        v = v.strip()
        if not v:
            return None
        if len(v) > MAX_EMPLOYEE_ID_LENGTH:
            raise ValueError(f"must be at most {MAX_EMPLOYEE_ID_LENGTH} characters")
        if not EMPLOYEE_ID_PATTERN.match(v):
            raise ValueError("must not contain whitespace or control characters")
        return v


class DailyReportParams(_ReportParams):
    """Parameters of a daily report: ``date`` as YYYY-MM-DD."""

    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> dt.date:
        return _parse_iso_date(v)


class WeeklyReportParams(_ReportParams):
    """Parameters of a weekly report.

    ``start_date`` may be any day of the target week; the report builder
    normalizes it to that week's Monday.
    """

    start_date: dt.date = Field(..., alias="startDate")

    @field_validator("start_date", mode="before")
    @classmethod
    def validate_start_date(cls, v: Any) -> dt.date:
        return _parse_iso_date(v)


class MonthlyReportParams(_ReportParams):
    """Parameters of a monthly report: ``year`` in [2000, 2100], ``month`` in [1, 12]."""

    year: int = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    month: int = Field(..., ge=1, le=12)

    @field_validator("year", "month", mode="before")
    @classmethod
    def validate_integer(cls, v: Any) -> int:
        return _parse_integer(v)


def _format_errors(error: PydanticValidationError) -> str:
    """Turn pydantic errors into one readable sentence per parameter."""
    parts = []
    for detail in error.errors():
        name = ".".join(str(loc) for loc in detail["loc"]) or "parameters"
        message = detail["msg"]
        if message.startswith("Value error, "):
            parts.append(f"'{name}' {message[len('Value error, '):]}")
        else:
            parts.append(f"'{name}': {message}")
    return "; ".join(parts)


def _build(model: type, **params):
    try:
        return model(**params)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid report parameters: {_format_errors(e)}",
            recovery_hint=(
                "Dates use YYYY-MM-DD, year is 2000-2100 and month is 1-12"
            ),
        ) from e


def parse_daily_params(date: Any, employee_id: Any = None) -> DailyReportParams:
    """Validate daily report parameters.

    Raises:
        ValidationError: If a parameter is malformed
    """
    return _build(DailyReportParams, date=date, employee_id=employee_id)


def parse_weekly_params(start_date: Any, employee_id: Any = None) -> WeeklyReportParams:
    """Validate weekly report parameters.

    Raises:
        ValidationError: If a parameter is malformed
    """
    return _build(WeeklyReportParams, start_date=start_date, employee_id=employee_id)


def parse_monthly_params(
    year: Any, month: Any, employee_id: Any = None
) -> MonthlyReportParams:
    """Validate monthly report parameters.

    Raises:
        ValidationError: If a parameter is malformed
    """
    return _build(MonthlyReportParams, year=year, month=month, employee_id=employee_id)
