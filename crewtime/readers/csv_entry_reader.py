"""Time entry reader for CSV exports of the crew time tracker.

This module reads a time entry export file and converts its rows into
validated TimeEntry objects.
"""

import datetime as dt
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd
from pydantic import ValidationError

from crewtime.exceptions import UpstreamFetchError
from crewtime.models.time_entry import TimeEntry
from crewtime.readers.entry_source import EntrySource, select_entries

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "employeeId",
    "employeeName",
    "jobSiteId",
    "jobSiteName",
    "clockInTime",
]
OPTIONAL_COLUMNS = ["id", "clockOutTime", "workDescription"]


class CsvEntryReader(EntrySource):
    """Entry source backed by a CSV export file.

    The expected file format:
    - Row 1: Headers (camelCase, as exported by the crew app)
    - Row 2+: One time entry per row

    Columns:
    - employeeId, employeeName: Employee identifier and display name
    - jobSiteId, jobSiteName: Job site identifier and display name
    - clockInTime: ISO 8601 instant (naive values are UTC)
    - clockOutTime: ISO 8601 instant, empty while the entry is open
    - id, workDescription: Optional

    Rows that fail validation are logged and skipped. A missing file, an
    unreadable file or missing required columns raise UpstreamFetchError.

    The parsed entries are cached and reused by every fetch until the
    file's modification time or size changes.

    Attributes:
        path: Path of the export file

    Example:
        >>> reader = CsvEntryReader("exports/time_entries.csv")
        >>> entries = reader.read_entries()
        >>> entries[0].employee_name
        'Ana Silva'
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the reader.

        Args:
            path: Path of the CSV export file
        """
        self.path = Path(path)
        self._cache: Optional[Tuple[Tuple[int, int], List[TimeEntry]]] = None

    def read_entries(self) -> List[TimeEntry]:
        """Read and parse every row of the export file.

        Returns:
            List of validated TimeEntry objects

        Raises:
            UpstreamFetchError: If the file cannot be read or lacks columns
        """
        try:
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except FileNotFoundError as e:
            raise UpstreamFetchError(
                f"Time entry file not found: {self.path}",
                recovery_hint="Check ENTRIES_FILE or pass --source",
            ) from e
        except pd.errors.EmptyDataError:
            logger.info(f"Time entry file {self.path} is empty")
            return []
        except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read time entry file {self.path}: {e}")
            raise UpstreamFetchError(
                f"Could not read time entry file {self.path}: {e}"
            ) from e

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise UpstreamFetchError(
                f"Time entry file {self.path} is missing columns: {', '.join(missing)}",
                recovery_hint=f"Expected columns: {', '.join(REQUIRED_COLUMNS)}",
            )

        entries = []
        for row_number, row in enumerate(df.to_dict(orient="records"), start=2):
            entry = self._parse_row(row, row_number)
            if entry:
                entries.append(entry)

        logger.info(
            f"Parsed {len(entries)} of {len(df)} time entries from {self.path}"
        )
        return entries

    def fetch_entries(
        self,
        window_start: dt.datetime,
        window_end: dt.datetime,
        employee_id: Optional[str] = None,
    ) -> List[TimeEntry]:
        return select_entries(self._cached_entries(), window_start, window_end, employee_id)

    def _cached_entries(self) -> List[TimeEntry]:
        try:
            stat = self.path.stat()
        except OSError:
            # Let read_entries raise the matching UpstreamFetchError
            return self.read_entries()

        signature = (stat.st_mtime_ns, stat.st_size)
        if self._cache is not None and self._cache[0] == signature:
            logger.debug(f"Using cached time entries from {self.path}")
            return self._cache[1]

        entries = self.read_entries()
        self._cache = (signature, entries)
        return entries

    def _parse_row(self, row: Dict[str, Any], row_number: int) -> Optional[TimeEntry]:
        """Parse a single row into a TimeEntry.

        Args:
            row: Column name to cell text
            row_number: 1-based line number in the file, for log messages

        Returns:
            TimeEntry, or None if the row is blank or invalid
        """
        values = {
            col: (str(row[col]).strip() or None)
            for col in REQUIRED_COLUMNS + OPTIONAL_COLUMNS
            if col in row
        }

        if not any(values.values()):
            return None

        try:
            return TimeEntry(**values)
        except ValidationError as e:
            logger.warning(f"Skipping invalid row {row_number} in {self.path}: {e}")
            return None
