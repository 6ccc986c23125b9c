"""KATCP codec configuration.

Defines the validated configuration model consumed by the stream parsing
helpers and by the protocol announcement builder.  Every field carries a
default so that ``KatcpCodecConfig()`` is a complete configuration.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

_KNOWN_FLAGS = frozenset("MITB")


class KatcpCodecConfig(BaseModel):
    """Configuration for the KATCP codec.

    The codec itself is stateless; this model only tunes how many-line
    input is split and which protocol version a device announces.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    max_line_length: int = Field(
        default=1_048_576,  # 1 MiB
        ge=1,
        description=(
            "Maximum accepted length of a single message line, in "
            "characters, excluding the terminator."
        ),
    )
    skip_blank_lines: bool = Field(
        default=True,
        description=(
            "When True, empty or whitespace-only lines between messages "
            "are ignored by parse_many instead of raising ParseError."
        ),
    )
    protocol_major: int = Field(
        default=5,
        ge=0,
        description="KATCP major version announced via #version-connect.",
    )
    protocol_minor: int = Field(
        default=0,
        ge=0,
        description="KATCP minor version announced via #version-connect.",
    )
    protocol_flags: str = Field(
        default="MI",
        description=(
            "Protocol flags announced via #version-connect: M (multi "
            "client), I (message ids), T (timeout hints), B (bulk "
            "sampling)."
        ),
    )

    @field_validator("protocol_flags")
    @classmethod
    def _check_flags(cls, value: str) -> str:
        unknown = sorted(set(value) - _KNOWN_FLAGS)
        if unknown:
            raise ValueError(f"unknown protocol flag(s): {''.join(unknown)}")
        return value
