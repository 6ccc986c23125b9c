"""KATCP wire subpackage -- escaping, grammar, message model and parser.

* **Escaping** -- :func:`escape` / :func:`unescape`
  (:mod:`~katcp_codec.wire.escaping`).
* **Grammar** -- compiled productions shared by parser and model
  (:mod:`~katcp_codec.wire.grammar`).
* **Message model** -- :class:`Message`, serialisation and error replies
  (:mod:`~katcp_codec.wire.message`).
* **Parser** -- :func:`parse`, :func:`parse_partial`, :func:`parse_many`
  (:mod:`~katcp_codec.wire.parser`).
"""
from __future__ import annotations

from katcp_codec.wire.escaping import EMPTY_SENTINEL, escape, unescape
from katcp_codec.wire.message import Message, format_error_reply
from katcp_codec.wire.parser import parse, parse_many, parse_partial

__all__ = [
    "EMPTY_SENTINEL",
    "escape",
    "unescape",
    "Message",
    "format_error_reply",
    "parse",
    "parse_partial",
    "parse_many",
]
