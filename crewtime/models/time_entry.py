"""Time entry data model.

A time entry is one clock-in/clock-out pair of an employee at a job site,
joined with the employee and job site display names.
"""

import datetime as dt
from typing import Optional

from pydantic import Field, field_validator

from crewtime.models.base import BaseDataModel


def ensure_utc(value: dt.datetime) -> dt.datetime:
    """Normalize a datetime to UTC. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


class TimeEntry(BaseDataModel):
    """Represents a single clock-in/clock-out record.

    An entry without ``clock_out_time`` is open (the employee is still
    clocked in) and is ignored by historical reports. The ordering of the
    two instants is not enforced here: stored snapshots can contain bad
    rows, and the aggregator decides whether to skip or reject them.

    Attributes:
        entry_id: Storage identifier of the entry (optional)
        employee_id: Stable employee identifier
        employee_name: Employee display name
        job_site_id: Stable job site identifier
        job_site_name: Job site display name
        clock_in_time: Clock-in instant (UTC)
        clock_out_time: Clock-out instant (UTC), None while open
        work_description: Optional description of the work done

    Example:
        >>> entry = TimeEntry(
        ...     employee_id="emp-1",
        ...     employee_name="Ana Silva",
        ...     job_site_id="site-1",
        ...     job_site_name="Harbor Bridge",
        ...     clock_in_time=dt.datetime(2024, 1, 8, 8, 0),
        ...     clock_out_time=dt.datetime(2024, 1, 8, 16, 30),
        ... )
        >>> entry.is_closed
        True
    """

    entry_id: Optional[str] = Field(None, alias="id", description="Entry identifier")
    employee_id: str = Field(..., min_length=1, alias="employeeId")
    employee_name: str = Field(..., alias="employeeName")
    job_site_id: str = Field(..., min_length=1, alias="jobSiteId")
    job_site_name: str = Field(..., alias="jobSiteName")
    clock_in_time: dt.datetime = Field(..., alias="clockInTime")
    clock_out_time: Optional[dt.datetime] = Field(None, alias="clockOutTime")
    work_description: Optional[str] = Field(None, alias="workDescription")

    @field_validator("employee_id", "job_site_id")
    @classmethod
    def validate_id(cls, v: str, info) -> str:
        """Reject identifiers that are blank after stripping."""
        if not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("clock_in_time", "clock_out_time")
    @classmethod
    def normalize_timezone(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        """Store every instant in UTC."""
        if v is None:
            return v
        return ensure_utc(v)

    @property
    def is_open(self) -> bool:
        """True while the employee is still clocked in."""
        return self.clock_out_time is None

    @property
    def is_closed(self) -> bool:
        """True once a clock-out time has been recorded."""
        return self.clock_out_time is not None
