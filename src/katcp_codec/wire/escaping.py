"""KATCP argument escaping.

KATCP arguments are separated by whitespace and messages by line
terminators, so those characters (and the escape character itself) are
written as two-character escape sequences.  The empty string has no
literal representation and is written as the ``\\@`` sentinel.
"""
from __future__ import annotations

import re

EMPTY_SENTINEL: str = "\\@"
"""Wire token for an empty string (and for an absent optional value)."""

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    " ": "\\_",
    "\0": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\x1b": "\\e",
    "\t": "\\t",
}

_UNESCAPES: dict[str, str] = {seq[1]: char for char, seq in _ESCAPES.items()}
_UNESCAPES["@"] = ""

_ESCAPE_PATTERN: re.Pattern[str] = re.compile(r"[\\ \0\n\r\x1b\t]")
_UNESCAPE_PATTERN: re.Pattern[str] = re.compile(r"\\([\\_0nret@])")


def escape(text: str) -> str:
    """Escape *text* into a single KATCP argument token."""
    if not text:
        return EMPTY_SENTINEL
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group()], text)


def unescape(token: str) -> str:
    """Reverse :func:`escape`.

    The token is scanned once from left to right, so ``\\\\_`` yields a
    backslash followed by an underscore.  A backslash that does not start
    one of the eight escape sequences is kept as-is.
    """
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPES[m.group(1)], token)
