"""Domain exceptions.

Lookup misses are never exceptions: they return ``None`` (single result)
or an empty list (filters). Only construction and encoding failures raise.
"""

from __future__ import annotations


class Rf2Error(Exception):
    """Base class for all rf2ctl domain errors."""


class HashInitializationError(Rf2Error):
    """The content-hash provider could not be constructed."""


class HashEncodingError(Rf2Error):
    """Hash input could not be encoded to bytes."""


class Rf2FormatError(Rf2Error):
    """A release file header or row could not be parsed."""

    def __init__(self, message: str, *, path: str | None = None, line: int | None = None) -> None:
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")
