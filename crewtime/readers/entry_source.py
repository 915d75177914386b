"""Time entry sources.

A source is the storage collaborator the report builder reads from. It
returns the entries clocked in inside a half-open UTC window, optionally
for a single employee.
"""

import datetime as dt
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from crewtime.models.time_entry import TimeEntry, ensure_utc

logger = logging.getLogger(__name__)


def select_entries(
    entries: Iterable[TimeEntry],
    window_start: dt.datetime,
    window_end: dt.datetime,
    employee_id: Optional[str] = None,
    closed_only: bool = False,
) -> List[TimeEntry]:
    """Filter entries by clock-in window, employee and open/closed state.

    Args:
        entries: Entries to filter
        window_start: Inclusive lower bound on clock-in
        window_end: Exclusive upper bound on clock-in
        employee_id: Keep only this employee's entries when given
        closed_only: Drop entries without a clock-out

    Returns:
        Matching entries in input order
    """
    start = ensure_utc(window_start)
    end = ensure_utc(window_end)
    return [
        entry
        for entry in entries
        if start <= entry.clock_in_time < end
        and (employee_id is None or entry.employee_id == employee_id)
        and (not closed_only or entry.is_closed)
    ]


class EntrySource(ABC):
    """Interface of a time entry store.

    Implementations must raise ``UpstreamFetchError`` when the store cannot
    be read. They may return a superset of the requested entries; the
    report builder filters again before aggregating.
    """

    @abstractmethod
    def fetch_entries(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str] = None,
    ) -> List[TimeEntry]:
        """Fetch open and closed entries clocked in within the window.

        Raises:
            UpstreamFetchError: If the store cannot be read
        """

    def fetch_closed_entries(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str] = None,
    ) -> List[TimeEntry]:
        """Fetch entries with a clock-out, clocked in within the window.

        Raises:
            UpstreamFetchError: If the store cannot be read
        """
        entries = self.fetch_entries(window_start, window_end, employee_id)
        return select_entries(
            entries, window_start, window_end, employee_id, closed_only=True
        )


class InMemoryEntrySource(EntrySource):
    """Entry source over a list held in memory.

    Example:
        >>> source = InMemoryEntrySource([entry1, entry2])
        >>> len(source.fetch_closed_entries(start, end))
        2
    """

    def __init__(self, entries: Iterable[TimeEntry] = ()):
        self._entries = tuple(entries)

    def fetch_entries(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str] = None,
    ) -> List[TimeEntry]:
        result = select_entries(self._entries, window_start, window_end, employee_id)
        logger.debug(f"In-memory source returned {len(result)} entries")
        return result
