"""Custom exceptions for tapedeck.

This module defines the exception hierarchy for handling errors
while reading tag containers and lyric text.
"""


class TapedeckError(Exception):
    """Base exception for tapedeck.

    All custom exceptions in this library inherit from this class,
    allowing callers to catch all tapedeck-related errors with a
    single except clause.
    """


class ParseError(TapedeckError):
    """Error parsing a tag container.

    Raised by the low-level readers when a structure is invalid.
    The public parsing functions catch it and return an empty result.
    """


class TruncatedDataError(ParseError):
    """A declared length runs past the end of the available data."""


class UnsupportedFormatError(TapedeckError):
    """The file extension does not map to any tag reader."""
