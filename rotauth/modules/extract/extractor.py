"""
Key-based JSON value extraction.

Pulls the value bound to the first occurrence of a key out of a JSON
document by scanning the text once and balancing brackets, instead of
parsing the whole document and walking it.
"""

import json
import logging
from typing import Any

from ...exceptions import KeyNotFound, MalformedJSONSpan

logger = logging.getLogger(__name__)

_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = {"}", "]"}
_WHITESPACE = " \t\r\n"


def to_json_text(document: Any, key: str) -> str:
    """
    Get the JSON text form of a document.

    Strings are taken to already be JSON text and bytes are decoded as
    UTF-8. Anything else is serialized in compact form.

    Raises:
        MalformedJSONSpan: If bytes are not UTF-8 or the object cannot be serialized
    """
    if isinstance(document, str):
        return document
    if isinstance(document, (bytes, bytearray)):
        try:
            return bytes(document).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedJSONSpan(key, "document is not valid UTF-8") from e
    try:
        return json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise MalformedJSONSpan(key, f"document is not JSON-serializable: {e}") from e


def _find_value_start(text: str, key: str) -> int:
    """
    Find where the value of the first `"key":` pair begins.

    Returns:
        Index of the first non-whitespace character after the colon

    Raises:
        KeyNotFound: If no occurrence of the key is followed by a colon
    """
    token = json.dumps(key, ensure_ascii=False)
    length = len(text)
    position = text.find(token)

    while position != -1:
        # An escaped quote belongs to a string value, not a key
        if position == 0 or text[position - 1] != "\\":
            cursor = position + len(token)
            while cursor < length and text[cursor] in _WHITESPACE:
                cursor += 1
            if cursor < length and text[cursor] == ":":
                cursor += 1
                while cursor < length and text[cursor] in _WHITESPACE:
                    cursor += 1
                return cursor
        position = text.find(token, position + 1)

    raise KeyNotFound(key)


def _scan_value(text: str, start: int, key: str) -> str:
    """
    Scan forward from start and return the text span of one JSON value.

    Containers end the instant their bracket stack empties. Scalars end
    at the first comma or closing bracket seen outside any string.
    """
    stack = []
    in_string = False
    escaped = False
    length = len(text)

    for index in range(start, length):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in _CLOSERS:
            if not stack:
                # Closer of the enclosing container ends a scalar value
                return text[start:index]
            expected = stack.pop()
            if char != expected:
                raise MalformedJSONSpan(
                    key, f"expected {expected!r} but found {char!r} at offset {index}", text[start:index + 1]
                )
            if not stack:
                return text[start:index + 1]
        elif char == "," and not stack:
            return text[start:index]

    if in_string or stack:
        raise MalformedJSONSpan(key, "document ended inside the value", text[start:])
    return text[start:]


def extract_span(document: Any, key: str) -> str:
    """
    Get the raw JSON text bound to the first occurrence of a key.

    Args:
        document: JSON text, UTF-8 bytes, or any JSON-serializable object
        key: Key to look for

    Returns:
        The value's text exactly as it appears in the document

    Raises:
        KeyNotFound: If the key does not occur
        MalformedJSONSpan: If the value's brackets do not balance, or the
            document is not UTF-8 or not serializable
    """
    text = to_json_text(document, key)
    start = _find_value_start(text, key)
    span = _scan_value(text, start, key).rstrip(_WHITESPACE)

    if not span:
        raise MalformedJSONSpan(key, "no value follows the key")

    return span


def extract_value(document: Any, key: str) -> Any:
    """
    Get the parsed value bound to the first occurrence of a key.

    Args:
        document: JSON text, UTF-8 bytes, or any JSON-serializable object
        key: Key to look for

    Returns:
        The parsed value (object, array, string, number, boolean or None)

    Raises:
        KeyNotFound: If the key does not occur
        MalformedJSONSpan: If the value's text is not valid JSON

    Example:
        >>> extract_value({"data": {"guest_token": "abc123", "x": 2}, "c": 3}, "data")
        {'guest_token': 'abc123', 'x': 2}
    """
    span = extract_span(document, key)

    try:
        return json.loads(span)
    except json.JSONDecodeError as e:
        logger.debug(f"Extracted span for {key!r} is not valid JSON: {e}")
        raise MalformedJSONSpan(key, f"invalid JSON: {e.msg}", span) from e
