"""KATCP codec error hierarchy.

Every failure the codec can report is a concrete exception class so that
callers can dispatch on the *kind* of failure: a line that could not be
tokenized, a well-formed message decoded against the wrong family, or an
argument list that does not fit the family's shape.

Hierarchy
---------
::

    KatcpError                 (residual / unspecified)
    +-- FormatError            local encode / formatting failure
    +-- ParseError             grammar violation
    +-- IncorrectType          wrong message name or kind for the target
    +-- MissingArgument        argument list exhausted early
    +-- BadArgument            argument present but not decodable

Usage
-----
Raise concrete subclasses directly::

    raise BadArgument("not a boolean", details={"token": token})

Catch by category::

    try:
        reply = Halt.Reply.from_message(message)
    except IncorrectType:
        # not a halt reply -- try the next family
        ...
"""
from __future__ import annotations

from typing import Any

from katcp_codec.core.types import RetCode

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class KatcpError(Exception):
    """Base exception for all KATCP codec errors.

    Raised directly for conditions outside the taxonomy below (for
    example a sensor record updated from a reading of another sensor).

    Attributes
    ----------
    code : str
        Short machine-readable identifier of the error kind.
    ret_code : RetCode
        Reply code a device uses when answering a request that failed
        with this error.
    message : str
        Human-readable description.
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    """

    code: str = "unknown"
    ret_code: RetCode = RetCode.FAIL
    message: str = "Unknown KATCP error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error for structured logs or diagnostics."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["detail"] = self.details
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class FormatError(KatcpError):
    """A value could not be rendered as a wire token."""

    code = "format"
    message = "Value cannot be formatted as a KATCP argument"


# ===================================================================
# Decode-side taxonomy (reply code ``invalid``)
# ===================================================================

class ParseError(KatcpError):
    """The input does not match the KATCP message grammar.

    Attributes
    ----------
    residual : str
        The input left unconsumed at the point the grammar failed.
    """

    code = "parse"
    ret_code = RetCode.INVALID
    message = "Malformed KATCP message"

    def __init__(
        self,
        message: str | None = None,
        *,
        residual: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.residual = residual
        details = dict(details or {})
        details.setdefault("residual", residual)
        super().__init__(message, details=details)


class IncorrectType(KatcpError):
    """A well-formed message was decoded against the wrong target."""

    code = "incorrect-type"
    ret_code = RetCode.INVALID
    message = "Message does not match the requested type"


class MissingArgument(KatcpError):
    """The message has fewer arguments than the target shape needs."""

    code = "missing-argument"
    ret_code = RetCode.INVALID
    message = "Missing argument"


class BadArgument(KatcpError):
    """An argument is present but cannot be decoded."""

    code = "bad-argument"
    ret_code = RetCode.INVALID
    message = "Bad argument"
