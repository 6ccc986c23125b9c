"""KATCP shared enums.

The enums here are used by every layer of the codec and are re-exported
from the top-level ``katcp_codec`` package.  They use *string* values: ``MessageKind``
values are the wire sigils, ``RetCode`` values are the wire labels.
"""
from __future__ import annotations

import enum


class MessageKind(enum.StrEnum):
    """The three categories of KATCP message.

    * **REQUEST** (``?``) -- always acknowledged by exactly one reply.
    * **REPLY** (``!``) -- sent in response to a request.
    * **INFORM** (``#``) -- needs no acknowledgement; sent synchronously
      while answering a request or asynchronously at any time.
    """

    REQUEST = "?"
    REPLY = "!"
    INFORM = "#"

    @property
    def sigil(self) -> str:
        """Return the single-character wire prefix."""
        return self.value


class RetCode(enum.StrEnum):
    """Return codes forming the first argument of most replies."""

    OK = "ok"
    INVALID = "invalid"
    FAIL = "fail"

    @property
    def is_ok(self) -> bool:
        return self is RetCode.OK
