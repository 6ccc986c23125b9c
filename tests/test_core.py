"""Tests for the KATCP codec core -- enums, error hierarchy and config.

Covers:

1. **MessageKind / RetCode** -- wire values and helpers.
2. **Errors** -- hierarchy, reply codes, ``to_dict`` and ``residual``.
3. **KatcpCodecConfig** -- defaults, validation and immutability.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from katcp_codec.core.config import KatcpCodecConfig
from katcp_codec.core.errors import (
    BadArgument,
    FormatError,
    IncorrectType,
    KatcpError,
    MissingArgument,
    ParseError,
)
from katcp_codec.core.types import MessageKind, RetCode

# =========================================================================
# Enums
# =========================================================================


class TestMessageKind:
    """Tests for MessageKind."""

    def test_sigils(self) -> None:
        """Each kind's value is its wire sigil."""
        assert MessageKind.REQUEST.sigil == "?"
        assert MessageKind.REPLY.sigil == "!"
        assert MessageKind.INFORM.sigil == "#"

    def test_lookup_by_sigil(self) -> None:
        """A sigil character converts back to its kind."""
        assert MessageKind("#") is MessageKind.INFORM


class TestRetCode:
    """Tests for RetCode."""

    def test_labels(self) -> None:
        assert [c.value for c in RetCode] == ["ok", "invalid", "fail"]

    def test_is_ok(self) -> None:
        assert RetCode.OK.is_ok
        assert not RetCode.FAIL.is_ok
        assert not RetCode.INVALID.is_ok


# =========================================================================
# Errors
# =========================================================================


class TestErrorHierarchy:
    """Tests for the KatcpError family."""

    @pytest.mark.parametrize(
        "cls",
        [FormatError, ParseError, IncorrectType, MissingArgument, BadArgument],
    )
    def test_subclasses_katcp_error(self, cls: type[KatcpError]) -> None:
        """Every concrete error is catchable as KatcpError."""
        assert issubclass(cls, KatcpError)

    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (KatcpError, "unknown"),
            (FormatError, "format"),
            (ParseError, "parse"),
            (IncorrectType, "incorrect-type"),
            (MissingArgument, "missing-argument"),
            (BadArgument, "bad-argument"),
        ],
    )
    def test_codes(self, cls: type[KatcpError], code: str) -> None:
        assert cls.code == code

    @pytest.mark.parametrize(
        "cls", [ParseError, IncorrectType, MissingArgument, BadArgument]
    )
    def test_decode_errors_reply_invalid(self, cls: type[KatcpError]) -> None:
        """Malformed-request errors map to the ``invalid`` reply code."""
        assert cls.ret_code is RetCode.INVALID

    @pytest.mark.parametrize("cls", [KatcpError, FormatError])
    def test_residual_errors_reply_fail(self, cls: type[KatcpError]) -> None:
        assert cls.ret_code is RetCode.FAIL

    def test_default_message(self) -> None:
        """Without a message the class default is used."""
        err = BadArgument()
        assert err.message == "Bad argument"
        assert str(err) == "Bad argument"

    def test_custom_message_and_details(self) -> None:
        err = MissingArgument("Missing name", details={"position": 0})
        assert err.message == "Missing name"
        assert err.details == {"position": 0}

    def test_to_dict(self) -> None:
        """to_dict nests code, message and detail under 'error'."""
        err = BadArgument("nope", details={"token": "x"})
        assert err.to_dict() == {
            "error": {
                "code": "bad-argument",
                "message": "nope",
                "detail": {"token": "x"},
            }
        }

    def test_to_dict_without_details(self) -> None:
        """The detail key is omitted when there are no details."""
        assert "detail" not in KatcpError("x").to_dict()["error"]

    def test_repr(self) -> None:
        assert repr(IncorrectType("wrong")) == (
            "IncorrectType(code='incorrect-type', message='wrong')"
        )


class TestParseError:
    """Tests for the residual carried by ParseError."""

    def test_residual_attribute(self) -> None:
        err = ParseError("bad", residual="$junk")
        assert err.residual == "$junk"

    def test_residual_in_details(self) -> None:
        """The residual is also recorded in details for to_dict."""
        err = ParseError("bad", residual="rest", details={"offset": 4})
        assert err.details == {"offset": 4, "residual": "rest"}

    def test_default_residual_is_empty(self) -> None:
        assert ParseError().residual == ""


# =========================================================================
# Config
# =========================================================================


class TestKatcpCodecConfig:
    """Tests for KatcpCodecConfig."""

    def test_defaults(self) -> None:
        cfg = KatcpCodecConfig()
        assert cfg.max_line_length == 1_048_576
        assert cfg.skip_blank_lines is True
        assert cfg.protocol_major == 5
        assert cfg.protocol_minor == 0
        assert cfg.protocol_flags == "MI"

    def test_overrides(self) -> None:
        cfg = KatcpCodecConfig(max_line_length=80, protocol_flags="MITB")
        assert cfg.max_line_length == 80
        assert cfg.protocol_flags == "MITB"

    def test_rejects_zero_line_length(self) -> None:
        with pytest.raises(ValidationError):
            KatcpCodecConfig(max_line_length=0)

    def test_rejects_unknown_flag(self) -> None:
        """Protocol flags must be drawn from M, I, T and B."""
        with pytest.raises(ValidationError, match="unknown protocol flag"):
            KatcpCodecConfig(protocol_flags="MX")

    def test_strict_types(self) -> None:
        """Strict mode refuses string-typed numbers."""
        with pytest.raises(ValidationError):
            KatcpCodecConfig(protocol_major="5")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        cfg = KatcpCodecConfig()
        with pytest.raises(ValidationError):
            cfg.max_line_length = 10  # type: ignore[misc]
