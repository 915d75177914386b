"""Crew time-tracking report engine."""

__version__ = "1.0.0"
