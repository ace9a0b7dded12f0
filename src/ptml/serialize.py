"""Serialization helpers for parsed tagged text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .tokenizer import is_tag_name_char

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .tokens import Decoration, ParseResult


def _start_tag(decoration: Decoration) -> str:
    name = decoration.tag_name
    if not name or not all(is_tag_name_char(c) for c in name):
        raise ValueError(f"Tag name {name!r} must be one or more letters or digits")
    if ">" in decoration.attribute:
        raise ValueError(f"Attribute of <{name}> cannot contain '>': {decoration.attribute!r}")
    if decoration.attribute:
        return f"<{name}={decoration.attribute}>"
    return f"<{name}>"


def _build_tree(length: int, decorations: Sequence[Decoration]) -> list[tuple[Decoration, list]]:
    """Rebuild the nesting from decorations listed in closing order.

    Each decoration adopts every earlier, still unparented decoration that
    starts inside it. Empty spans at the same offset may nest or sit side by
    side; both forms parse back to the same list.
    """
    roots: list[tuple[Decoration, list]] = []
    last_end = 0
    for decoration in decorations:
        start, end = decoration.start, decoration.end
        if not 0 <= start <= end <= length:
            raise ValueError(f"{decoration!r} is outside the plain text (length {length})")
        if end < last_end:
            raise ValueError(f"{decoration!r} ends before a decoration that closed earlier")
        last_end = end

        children = []
        while roots and roots[-1][0].start >= start:
            children.append(roots.pop())
        if roots and roots[-1][0].end > start:
            raise ValueError(f"{decoration!r} crosses {roots[-1][0]!r}")
        children.reverse()
        roots.append((decoration, children))
    return roots


def _write(plain_text: str, nodes: list[tuple[Decoration, list]], start: int, end: int, parts: list[str]) -> None:
    pos = start
    for decoration, children in nodes:
        parts.append(plain_text[pos : decoration.start])
        parts.append(_start_tag(decoration))
        _write(plain_text, children, decoration.start, decoration.end, parts)
        parts.append(f"</{decoration.tag_name}>")
        pos = decoration.end
    parts.append(plain_text[pos:end])


def to_markup(plain_text: str, decorations: Iterable[Decoration]) -> str:
    """Rebuild tagged text that parses back to ``plain_text`` and ``decorations``.

    ``decorations`` must be in closing order, as ``parse`` returns them.
    Raises ValueError for input no tagged text could produce.
    """
    if "<" in plain_text:
        raise ValueError("Plain text cannot contain '<'; tagged text has no escape for it")
    nodes = _build_tree(len(plain_text), list(decorations))
    parts: list[str] = []
    _write(plain_text, nodes, 0, len(plain_text), parts)
    return "".join(parts)


def decorations_at(decorations: Iterable[Decoration], offset: int) -> list[Decoration]:
    """Decorations covering the character at ``offset``, innermost first."""
    return [decoration for decoration in decorations if decoration.covers(offset)]


def to_test_format(result: ParseResult) -> str:
    """Readable dump of a parse result: the plain text, then one line per decoration."""
    plain_text, decorations = result
    lines = [f'| "{plain_text}"']
    for decoration in decorations:
        attr = f"={decoration.attribute}" if decoration.attribute else ""
        lines.append(f"| <{decoration.tag_name}{attr}> {decoration.start}..{decoration.end}")
    return "\n".join(lines)
