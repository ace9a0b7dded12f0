from .parser import (
    InvalidTokenError,
    MarkupError,
    MismatchedEndTagError,
    UnclosedStartTagError,
    UnterminatedTagError,
    parse,
)
from .serialize import decorations_at, to_markup, to_test_format
from .tokens import Decoration, ParseError, ParseFailure, ParseResult

__all__ = [
    "Decoration",
    "InvalidTokenError",
    "MarkupError",
    "MismatchedEndTagError",
    "ParseError",
    "ParseFailure",
    "ParseResult",
    "UnclosedStartTagError",
    "UnterminatedTagError",
    "decorations_at",
    "parse",
    "to_markup",
    "to_test_format",
]
