import enum

from .errors import (
    INVALID_TOKEN,
    MISMATCHED_END_TAG,
    UNCLOSED_START_TAG,
    UNTERMINATED_TAG,
    generate_error_message,
)
from .tokens import Decoration, ParseError, ParseFailure, ParseResult, PendingTag


class State(enum.IntEnum):
    PLAIN_TEXT = 0
    START_TAG_NAME = 1
    ATTRIBUTE = 2
    END_TAG_NAME = 3


_STATE_DESCRIPTIONS = {
    State.START_TAG_NAME: "inside a tag name",
    State.ATTRIBUTE: "inside an attribute",
    State.END_TAG_NAME: "inside an end tag name",
}


def is_tag_name_char(c):
    return c.isalpha() or c.isdecimal()


class TokenizerOpts:
    __slots__ = ("debug",)

    def __init__(self, debug=False):
        self.debug = bool(debug)


class Tokenizer:
    PLAIN_TEXT = State.PLAIN_TEXT
    START_TAG_NAME = State.START_TAG_NAME
    ATTRIBUTE = State.ATTRIBUTE
    END_TAG_NAME = State.END_TAG_NAME

    __slots__ = (
        "attribute",
        "buffer",
        "decorations",
        "error",
        "open_tags",
        "opts",
        "plain_text",
        "pos",
        "range_starts",
        "state",
        "tag_name",
    )

    def __init__(self, opts=None):
        self.opts = opts or TokenizerOpts()

        self.state = self.PLAIN_TEXT
        self.buffer = ""
        self.pos = -1
        self.error = None

        # Reusable buffers, cleared at the start of every run.
        self.plain_text = []
        self.tag_name = []
        self.attribute = []
        self.decorations = []
        self.open_tags = []
        self.range_starts = []

    def run(self, text):
        """Scan ``text`` once and return a ``ParseResult`` or a ``ParseFailure``."""
        self.buffer = text or ""
        self.state = self.PLAIN_TEXT
        self.pos = -1
        self.error = None
        self.plain_text.clear()
        self.tag_name.clear()
        self.attribute.clear()
        self.decorations.clear()
        self.open_tags.clear()
        self.range_starts.clear()

        for c in self.buffer:
            self.pos += 1
            state = self.state
            if state == self.PLAIN_TEXT:
                if self._state_plain_text(c):
                    break
            elif state == self.START_TAG_NAME:
                if self._state_start_tag_name(c):
                    break
            elif state == self.ATTRIBUTE:
                if self._state_attribute(c):
                    break
            elif state == self.END_TAG_NAME:
                if self._state_end_tag_name(c):
                    break
            else:
                raise RuntimeError(f"Invalid tokenizer state: {state!r}")
        else:
            self._finish()

        if self.error is not None:
            return ParseFailure(self.error, self.buffer)
        return ParseResult("".join(self.plain_text), self.decorations)

    # ---------------------
    # State handlers
    # ---------------------
    # Each handler consumes one character and returns True to stop the scan.

    def _state_plain_text(self, c):
        if c == "<":
            self.range_starts.append(len(self.plain_text))
            self._switch(self.START_TAG_NAME)
            return False
        self.plain_text.append(c)
        return False

    def _state_start_tag_name(self, c):
        if c == "/":
            if self.tag_name:
                return self._fail(INVALID_TOKEN, token=c, expected="Expected tag name.")
            # An end tag does not open a span.
            self.range_starts.pop()
            self._switch(self.END_TAG_NAME)
            return False
        if c == "=":
            if not self.tag_name:
                return self._fail(INVALID_TOKEN, token=c, expected="Expected tag name.")
            self._switch(self.ATTRIBUTE)
            return False
        if c == ">":
            if not self.tag_name:
                return self._fail(INVALID_TOKEN, token=c, expected="Expected tag name.")
            self._push_open_tag()
            return False
        if not is_tag_name_char(c):
            return self._fail(INVALID_TOKEN, token=c, expected="Tag names may only contain letters and digits.")
        self.tag_name.append(c)
        return False

    def _state_attribute(self, c):
        if c == ">":
            if not self.attribute:
                return self._fail(INVALID_TOKEN, token=c, expected="Expected attribute.")
            self._push_open_tag()
            return False
        self.attribute.append(c)
        return False

    def _state_end_tag_name(self, c):
        if c == ">":
            if not self.tag_name:
                return self._fail(INVALID_TOKEN, token=c, expected="Expected tag name.")
            return self._close_tag()
        if not is_tag_name_char(c):
            return self._fail(INVALID_TOKEN, token=c, expected="Tag names may only contain letters and digits.")
        self.tag_name.append(c)
        return False

    # ---------------------
    # Nesting
    # ---------------------

    def _push_open_tag(self):
        tag = PendingTag("".join(self.tag_name), "".join(self.attribute))
        self.open_tags.append(tag)
        self.tag_name.clear()
        self.attribute.clear()
        if self.opts.debug:
            self._debug(f"open <{tag.tag_name}> attribute={tag.attribute!r} at {self.range_starts[-1]}")
        self._switch(self.PLAIN_TEXT)

    def _close_tag(self):
        name = "".join(self.tag_name)
        if not self.open_tags:
            return self._fail(MISMATCHED_END_TAG)
        tag = self.open_tags.pop()
        if tag.tag_name.casefold() != name.casefold():
            return self._fail(MISMATCHED_END_TAG, name=name, open_name=tag.tag_name)
        start = self.range_starts.pop()
        decoration = Decoration(start, len(self.plain_text), tag.tag_name, tag.attribute)
        self.decorations.append(decoration)
        self.tag_name.clear()
        if self.opts.debug:
            self._debug(f"close {decoration!r}")
        self._switch(self.PLAIN_TEXT)
        return False

    def _finish(self):
        if self.state != self.PLAIN_TEXT:
            self._fail(UNTERMINATED_TAG, where=_STATE_DESCRIPTIONS[self.state])
            return
        if self.open_tags:
            self._fail(UNCLOSED_START_TAG, name=self.open_tags[-1].tag_name)

    # ---------------------
    # Helpers
    # ---------------------

    def _switch(self, state):
        if self.opts.debug and state != self.state:
            self._debug(f"{self.state.name} -> {state.name} at {self.pos}")
        self.state = state

    def _fail(self, code, **context):
        message = generate_error_message(code, **context)
        self.error = ParseError(code, offset=self.pos, message=message, source=self.buffer)
        if self.opts.debug:
            self._debug(f"error {self.error}")
        return True

    def _debug(self, message):
        # Only called when opts.debug is set, so callers skip formatting otherwise.
        indent = "  " * len(self.open_tags)
        print(f"[ptml] {indent}{message}")
