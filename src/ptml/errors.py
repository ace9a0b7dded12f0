"""Error codes and human-readable messages for tagged-text parse errors."""

INVALID_TOKEN = "invalid-token"
MISMATCHED_END_TAG = "mismatched-end-tag"
UNTERMINATED_TAG = "unterminated-tag"
UNCLOSED_START_TAG = "unclosed-start-tag"

ERROR_CODES = (INVALID_TOKEN, MISMATCHED_END_TAG, UNTERMINATED_TAG, UNCLOSED_START_TAG)

_MESSAGES = {
    INVALID_TOKEN: "Invalid token {token!r}. {expected}",
    MISMATCHED_END_TAG: 'End tag "{name}" does not match start tag "{open_name}"',
    UNTERMINATED_TAG: "Unexpected end of text {where}",
    UNCLOSED_START_TAG: 'Unexpected end of text. Start tag "{name}" is not closed',
}

# Fallbacks for templates whose arguments were not supplied.
_DEFAULTS = {
    INVALID_TOKEN: "Invalid token",
    MISMATCHED_END_TAG: "End tag has no matching start tag",
    UNTERMINATED_TAG: "Unexpected end of text inside a tag",
    UNCLOSED_START_TAG: "Unexpected end of text with unclosed start tags",
}


def generate_error_message(code, **context):
    """Format the message for ``code`` using the keyword arguments as context."""
    template = _MESSAGES.get(code)
    if template is None:
        return code
    if not context:
        return _DEFAULTS[code]
    try:
        return template.format(**context)
    except KeyError:
        return _DEFAULTS[code]
