"""Tagged-text parser entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from .errors import INVALID_TOKEN, MISMATCHED_END_TAG, UNCLOSED_START_TAG, UNTERMINATED_TAG
from .tokenizer import Tokenizer, TokenizerOpts

if TYPE_CHECKING:
    from .tokens import ParseError, ParseResult


class MarkupError(SyntaxError):
    """Raised by strict mode when tagged text is malformed.

    Inherits from SyntaxError so tracebacks point at the offending line and
    column of the input. ``position`` is the 0-based character offset into the
    whole text; ``offset`` keeps its SyntaxError meaning (1-based column).
    """

    code: ClassVar[str | None] = None
    error: ParseError

    _registry: ClassVar[dict[str, type[MarkupError]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if cls.code is not None:
            MarkupError._registry[cls.code] = cls

    def __init__(self, error: ParseError) -> None:
        self.error = error
        super().__init__(error.message)
        source = error.source or ""
        pos = error.offset if error.offset is not None and error.offset >= 0 else 0
        line_start = source.rfind("\n", 0, pos) + 1
        line_end = source.find("\n", pos)
        if line_end == -1:
            line_end = len(source)
        self.lineno = source.count("\n", 0, pos) + 1
        self.offset = pos - line_start + 1
        self.text = source[line_start:line_end]
        self.end_lineno = self.lineno
        self.end_offset = self.offset + 1

    @property
    def position(self) -> int | None:
        return self.error.offset

    @classmethod
    def for_error(cls, error: ParseError) -> MarkupError:
        return cls._registry.get(error.code, MarkupError)(error)


class InvalidTokenError(MarkupError):
    """A character appeared where only a delimiter or a letter/digit is valid."""

    code = INVALID_TOKEN


class MismatchedEndTagError(MarkupError):
    """An end tag does not close the innermost open tag."""

    code = MISMATCHED_END_TAG


class UnterminatedTagError(MarkupError):
    """The text ended inside a tag name, an attribute or an end tag name."""

    code = UNTERMINATED_TAG


class UnclosedStartTagError(MarkupError):
    """The text ended while one or more start tags were still open."""

    code = UNCLOSED_START_TAG


def parse(text: str | None, strict: bool = False, *, debug: bool = False) -> ParseResult:
    """Split tagged text into plain text and decorations.

    Returns a ``ParseResult`` that unpacks as ``(plain_text, decorations)``,
    with decorations in the order their end tags appear.

    Malformed input raises a ``MarkupError`` subclass when ``strict`` is set.
    Otherwise the whole input comes back unchanged as plain text with no
    decorations; there is no partial recovery.
    """
    if text is None:
        text = ""
    elif not isinstance(text, str):
        raise TypeError(f"parse() expects str, got {type(text).__name__}")

    tokenizer = Tokenizer(TokenizerOpts(debug=debug))
    result = tokenizer.run(text)
    if result.ok:
        return result

    if strict:
        raise result.error.as_exception()
    if debug:
        print(f"[ptml] discarding markup: {result.error}")
    return result.fallback()
