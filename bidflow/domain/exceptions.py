"""Custom exceptions for announcement input handling."""

from typing import Optional


class InputError(Exception):
    """Base exception for problems with caller-supplied input files.

    The matcher itself never raises for announcement content; these errors
    come only from reading announcements off disk for the CLI.
    """

    pass


class AnnouncementLoadError(InputError):
    """An announcement file could not be read or a record failed validation."""

    def __init__(self, message: str, path: str, index: Optional[int] = None) -> None:
        """Initialize load error with the file and, when known, the record index.

        Args:
            message: Human-readable error message
            path: File that failed to load
            index: Zero-based position of the offending record
        """
        super().__init__(message)
        self.path = path
        self.index = index
