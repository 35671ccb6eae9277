"""
Error types shared by the converters, the registry and the scanner.

Parsing problems caused by user input are never raised. They are collected as
ParseError values and inspected after parsing. Only programming errors made by
the caller (such as registering the same flag twice) are raised.
"""

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .parameter import Parameter


class ErrorKind(enum.Enum):
    """Category of a parse error, with the description shown to users."""

    INVALID_ARGUMENT = "Invalid Argument"
    OUT_OF_RANGE = "Value Out of Range"
    UNKNOWN_KEY = "Unknown Argument"
    MISSING_VALUE = "Missing Value"
    DUPLICATE_REGISTRATION = "Duplicate Registration"

    @property
    def description(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConversionFailure:
    """Why a raw string could not be converted to a parameter's type."""

    kind: ErrorKind
    detail: str


@dataclass(frozen=True)
class ParseError:
    """
    A single problem found while scanning the command line.

    Attributes:
        kind: The error category.
        source: The offending raw text (a whole token, a key or a value).
        position: Index of the token in the argument vector, or -1 when the
            error is not tied to a token.
        detail: Human readable explanation.
        parameter: The related parameter, if one was resolved. The error does
            not own it.
    """

    kind: ErrorKind
    source: str
    position: int = -1
    detail: str = ""
    parameter: Optional["Parameter"] = None

    def __str__(self) -> str:
        message = f"Error: {self.kind.description} @ [{self.source}]"
        if self.detail:
            message = f"{message}: {self.detail}"
        return message


class DuplicateRegistrationError(ValueError):
    """Raised when a key, long name or remainder is declared twice."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(detail)
        self.error = ParseError(
            kind=ErrorKind.DUPLICATE_REGISTRATION, source=source, detail=detail
        )
