"""Readers for time entry stores."""

from crewtime.readers.csv_entry_reader import CsvEntryReader
from crewtime.readers.entry_source import (
    EntrySource,
    InMemoryEntrySource,
    select_entries,
)

__all__ = [
    "CsvEntryReader",
    "EntrySource",
    "InMemoryEntrySource",
    "select_entries",
]
