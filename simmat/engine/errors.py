"""Error kinds raised while loading a benchmark and building the grid.

Every failure is terminal for a run; the CLI maps them to exit codes and the
API to 422 responses.
"""

from __future__ import annotations


class SimMatError(Exception):
    """Base class: carries the offending source and, when known, the token."""

    def __init__(self, message: str, *, source: str = "<input>", token: str | None = None) -> None:
        self.message = message
        self.source = source
        self.token = token
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.source}: {self.message}"
        if self.token is not None:
            text += f" (at {self.token!r})"
        return text


class UnsupportedFormat(SimMatError):
    """Category file version is newer than the parser understands."""


class ParentNotFound(SimMatError):
    """A category names a parent that has not been defined earlier in the file."""


class FormatError(SimMatError):
    """Category file content is inconsistent with its header or malformed."""


class ReadError(SimMatError):
    """Missing, unreadable, or truncated input."""


class UsageError(SimMatError):
    """Malformed command line invocation."""


class WriteError(SimMatError):
    """The output image could not be written."""
