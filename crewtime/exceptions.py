"""Exception hierarchy for the report engine.

Every error carries a human-readable message and an optional recovery hint
that the CLI prints below the message.
"""

from typing import Optional


class CrewTimeError(Exception):
    """Base exception for report engine errors."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize the error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ValidationError(CrewTimeError):
    """Malformed report parameters. Raised before any data is fetched."""

    pass


class DataIntegrityError(CrewTimeError):
    """A closed time entry whose clock-out is not after its clock-in."""

    pass


class UpstreamFetchError(CrewTimeError):
    """The time entry store could not be read."""

    pass
