"""Exceptions raised by the feed builder."""

from typing import Any


class FeedError(Exception):
    """Base class for feed building errors."""


class FieldMissing(FeedError, KeyError):
    """Raised when an item record lacks a required field."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Feed item is missing required field: {field}")

    def __str__(self) -> str:
        return self.args[0]


class DateParseError(FeedError, ValueError):
    """Raised when a date cannot be read under the active date format."""

    def __init__(self, value: Any, date_format: str, reason: str = ""):
        self.value = value
        self.date_format = date_format
        message = f"Cannot read {value!r} as a {date_format} date"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
