"""Malformed input conformance tests.

Verifies that every grammar violation and every shape mismatch is
reported with the matching error kind and never produces a partial
result.
"""
from __future__ import annotations

import pytest

from katcp_codec import (
    BadArgument,
    IncorrectType,
    MissingArgument,
    ParseError,
    decode_message,
    parse,
)
from katcp_codec.messages import Help, SensorValue

# ===================================================================
# Grammar violations
# ===================================================================


class TestGrammarViolations:
    """Lines outside the grammar raise ParseError."""

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "\n",
            "halt\n",
            "*halt\n",
            "?\n",
            "?9lives\n",
            "?under_score\n",
            "?halt[]\n",
            "?halt[01]\n",
            "?halt [1]x\\q\n",
            "?halt bad\\escape\n",
            "?halt nul\0here\n",
            "?halt[" + "1" * 5000 + "]\n",
        ],
    )
    def test_rejected(self, line: str) -> None:
        with pytest.raises(ParseError):
            parse(line)

    def test_residual_points_at_failure(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("?halt ok bad\\escape\n")
        assert exc_info.value.residual == "\\escape\n"
        assert exc_info.value.details["offset"] == 12


# ===================================================================
# Shape mismatches
# ===================================================================


class TestShapeMismatches:
    """Grammatical lines that do not fit the family shape."""

    def test_unknown_name(self) -> None:
        with pytest.raises(IncorrectType):
            decode_message(parse("?frobnicate\n"))

    def test_wrong_kind(self) -> None:
        with pytest.raises(IncorrectType):
            decode_message(parse("#watchdog\n"))

    def test_missing(self) -> None:
        with pytest.raises(MissingArgument):
            decode_message(parse("#help halt\n"))

    def test_surplus(self) -> None:
        with pytest.raises(BadArgument):
            decode_message(parse("?watchdog now\n"))

    def test_count_exceeds_records(self) -> None:
        with pytest.raises(MissingArgument):
            SensorValue.Inform.from_line("#sensor-value 100 3 a nominal 1\n")

    def test_count_not_a_number(self) -> None:
        with pytest.raises(BadArgument):
            Help.Reply.from_line("!help ok many\n")

    @pytest.mark.parametrize(
        "error", [ParseError, IncorrectType, MissingArgument, BadArgument]
    )
    def test_decode_errors_reply_invalid(self, error: type) -> None:
        assert error.ret_code.value == "invalid"
