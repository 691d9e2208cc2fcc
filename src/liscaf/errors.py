"""Custom exception types raised by the liscaf engines."""

from __future__ import annotations

from pathlib import PurePath

__all__ = [
    "ConfigurationError",
    "DestinationReadError",
    "GitError",
    "LiscafError",
    "SourceReadError",
    "WriteError",
]


class LiscafError(RuntimeError):
    """Base class for every error raised by liscaf."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(LiscafError, ValueError):
    """Raised when names or options are unusable. Always fatal."""


class _PathError(LiscafError):
    def __init__(self, path: PurePath | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = message


class SourceReadError(_PathError):
    """A file in the template tree cannot be read; aborts the run."""


class DestinationReadError(_PathError):
    """An existing destination file cannot be read for comparison."""


class WriteError(_PathError):
    """A planned write could not be applied to the destination."""


class GitError(LiscafError):
    """Raised when the ``git`` executable fails or is unavailable."""
