from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Decoration:
    """A tag applied to the character range ``[start, end)`` of the plain text."""

    start: int
    end: int
    tag_name: str
    attribute: str = ""

    def covers(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def matches(self, name: str) -> bool:
        return self.tag_name.casefold() == name.casefold()

    def __repr__(self):
        attr = f"={self.attribute!r}" if self.attribute else ""
        return f"Decoration(<{self.tag_name}{attr}> {self.start}..{self.end})"


class PendingTag:
    """A start tag whose end tag has not been seen yet."""

    __slots__ = ("attribute", "tag_name")

    def __init__(self, tag_name, attribute=""):
        self.tag_name = tag_name
        self.attribute = attribute

    def __repr__(self):
        return f"PendingTag({self.tag_name!r}, {self.attribute!r})"


class ParseError:
    """Represents a parse error with the character offset it was detected at."""

    __slots__ = ("code", "message", "offset", "source")

    def __init__(self, code, offset=None, message=None, source=None):
        self.code = code
        self.offset = offset
        self.message = message or code
        self.source = source

    def __repr__(self):
        if self.offset is not None:
            return f"ParseError({self.code!r}, offset={self.offset})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.offset is not None:
            if self.message != self.code:
                return f"({self.offset}): {self.code} - {self.message}"
            return f"({self.offset}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.offset == other.offset

    __hash__ = None  # Unhashable since we define __eq__

    def as_exception(self):
        """Build the ``MarkupError`` subclass matching this error's code."""
        from .parser import MarkupError  # noqa: PLC0415

        return MarkupError.for_error(self)


class ParseResult:
    """Successful parse: the plain text and its decorations in closing order.

    Unpacks as ``plain_text, decorations = result``.
    """

    __slots__ = ("decorations", "plain_text")

    ok = True

    def __init__(self, plain_text, decorations=()):
        self.plain_text = plain_text
        self.decorations = tuple(decorations)

    def __iter__(self):
        yield self.plain_text
        yield self.decorations

    def __len__(self):
        return 2

    def __getitem__(self, index):
        return (self.plain_text, self.decorations)[index]

    def __eq__(self, other):
        if isinstance(other, ParseResult):
            return self.plain_text == other.plain_text and self.decorations == other.decorations
        if isinstance(other, tuple):
            return (self.plain_text, self.decorations) == other
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"ParseResult({self.plain_text!r}, {list(self.decorations)!r})"


class ParseFailure:
    """Failed parse: the first error and the untouched input text."""

    __slots__ = ("error", "text")

    ok = False

    def __init__(self, error, text):
        self.error = error
        self.text = text

    def fallback(self):
        """The identity result lenient callers get instead of an error."""
        return ParseResult(self.text, ())

    def __repr__(self):
        return f"ParseFailure({self.error!r})"
