"""Exceptions raised by cutplan."""

from __future__ import annotations


class CutplanError(ValueError):
    """Base class for cutplan errors."""


class ParseError(CutplanError):
    """A clock time could not be parsed as 24-hour ``HH:MM``."""


class DateError(CutplanError):
    """A calendar date was malformed or outside the challenge timeline."""


class StorageError(CutplanError):
    """A row that was just written could not be read back."""
