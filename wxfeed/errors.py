"""
Exceptions raised by the wxfeed modules.
"""

from __future__ import annotations


class FeedError(Exception):
    """Base exception for anything that aborts a whole feed batch."""


class FeedResponseError(FeedError):
    """
    Exception for a failed retrieval of the METAR cache, either a transport
    problem or a response with a non-success status.
    """

    def __init__(self, message: object, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FeedDataError(FeedError):
    """Exception for a payload that cannot be decompressed or read as a table."""


class FeedSchemaError(FeedError):
    """Exception for rows that do not match the fixed column layout."""

    def __init__(self, expected: int, actual: int, row_number: int | None = None) -> None:
        if row_number is None:
            message = f"Expecting {expected} columns per row, got {actual}."
        else:
            message = (
                f"Expecting {expected} columns per row, row {row_number} has {actual}."
            )
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.row_number = row_number


class UnitConversionError(Exception):
    """Exception for a conversion between units that are not a known pair."""
