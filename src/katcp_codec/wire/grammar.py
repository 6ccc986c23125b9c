"""KATCP message grammar productions.

The productions are compiled once and shared by the parser and by the
validating :class:`~katcp_codec.wire.message.Message` constructor::

    message   = kind name [id] *(ws argument) [ws] (eol / eof)
    kind      = "?" / "!" / "#"
    name      = ALPHA *(ALPHA / DIGIT / "-")
    id        = "[" %x31-39 *9DIGIT "]"
    ws        = 1*(SP / TAB)
    argument  = 1*(escape / plain)
    escape    = "\\" ("\\" / "_" / "0" / "n" / "r" / "e" / "t" / "@")
    plain     = 1*(any char except "\\", SP, NUL, CR, LF, TAB)
    eol       = CR / LF

ALPHA and DIGIT are the ASCII ranges only.
"""
from __future__ import annotations

import re

SIGILS: frozenset[str] = frozenset("?!#")
EOL_CHARS: frozenset[str] = frozenset("\r\n")

MAX_MESSAGE_ID: int = 0xFFFF_FFFF
"""Largest message id accepted on the wire (unsigned 32-bit)."""

_ARGUMENT_BODY = r"(?:\\[\\_0nret@]|[^\\ \0\n\r\t])+"

NAME_PATTERN: re.Pattern[str] = re.compile(r"[A-Za-z][A-Za-z0-9-]*")
ID_PATTERN: re.Pattern[str] = re.compile(r"\[([1-9][0-9]{0,9})\]")
WS_PATTERN: re.Pattern[str] = re.compile(r"[ \t]+")
ARGUMENT_PATTERN: re.Pattern[str] = re.compile(_ARGUMENT_BODY)
WS_ARGUMENT_PATTERN: re.Pattern[str] = re.compile(r"[ \t]+(" + _ARGUMENT_BODY + ")")


def _residual(pattern: re.Pattern[str], token: str) -> str | None:
    match = pattern.match(token)
    if match is None:
        return token
    if match.end() == len(token):
        return None
    return token[match.end():]


def name_residual(name: str) -> str | None:
    """Return the part of *name* the name production rejects, or ``None``."""
    return _residual(NAME_PATTERN, name)


def argument_residual(argument: str) -> str | None:
    """Return the part of *argument* the argument production rejects, or ``None``."""
    return _residual(ARGUMENT_PATTERN, argument)


def is_valid_name(name: str) -> bool:
    return name_residual(name) is None


def is_valid_argument(argument: str) -> bool:
    return argument_residual(argument) is None
