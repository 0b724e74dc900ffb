"""
Cookie text helpers.

The forgery-protection token is read with a small explicit grammar rather
than a pattern match:

    pair     := boundary "ct0" "=" value ";"
    boundary := start of text | ";" | whitespace
    value    := one or more ASCII letters or digits

The first pair that satisfies the grammar wins.
"""

import string
from typing import Iterable, Mapping, Optional, Tuple, Union

import httpx

CSRF_COOKIE_NAME = "ct0"
VALUE_CHARSET = frozenset(string.ascii_letters + string.digits)
TERMINATOR = ";"

HeadersLike = Union[str, httpx.Headers, Mapping[str, str], Iterable[Tuple[str, str]]]


def extract_csrf_token(cookie_text: str, name: str = CSRF_COOKIE_NAME) -> Optional[str]:
    """
    Read the forgery-protection token from cookie text.

    Args:
        cookie_text: Cookie text such as "guest_id=v1%3A1; ct0=deadbeef123;"
        name: Cookie name carrying the token

    Returns:
        The token, or None if no well-formed pair is present

    Example:
        >>> extract_csrf_token("a=1; ct0=deadbeef123; b=2")
        'deadbeef123'
    """
    if not cookie_text:
        return None

    prefix = name + "="
    length = len(cookie_text)
    position = cookie_text.find(prefix)

    while position != -1:
        at_boundary = position == 0 or cookie_text[position - 1] == TERMINATOR or cookie_text[position - 1].isspace()
        if at_boundary:
            cursor = position + len(prefix)
            start = cursor
            while cursor < length and cookie_text[cursor] in VALUE_CHARSET:
                cursor += 1
            if cursor > start and cursor < length and cookie_text[cursor] == TERMINATOR:
                return cookie_text[start:cursor]
        position = cookie_text.find(prefix, position + 1)

    return None


def _header_items(headers) -> Iterable[Tuple[str, str]]:
    if isinstance(headers, httpx.Headers):
        # multi_items keeps repeated set-cookie headers apart
        return headers.multi_items()
    if isinstance(headers, Mapping):
        return headers.items()
    return headers


def cookie_string_from_headers(headers: HeadersLike) -> str:
    """
    Collapse response headers into a single cookie string.

    Each set-cookie header contributes its leading "name=value" segment,
    terminated by ";". Attributes such as Path or Expires are dropped.
    A str argument is returned unchanged.

    Args:
        headers: httpx.Headers, a mapping, (name, value) pairs, or cookie text

    Returns:
        Cookie text such as "guest_id=v1%3A1; ct0=deadbeef123;"
    """
    if isinstance(headers, str):
        return headers

    pairs = []
    for name, value in _header_items(headers):
        if name.lower() != "set-cookie" or not value:
            continue
        pair = value.split(TERMINATOR, 1)[0].strip()
        if pair:
            pairs.append(pair + TERMINATOR)

    return " ".join(pairs)
