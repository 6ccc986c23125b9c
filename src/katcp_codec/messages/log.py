"""Log messages and log-level control."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Self

from katcp_codec.arguments.composites import decode_coded_result, encode_coded_result
from katcp_codec.arguments.scalars import STRING, TIMESTAMP, DiscreteCodec
from katcp_codec.arguments.stream import ArgumentStream
from katcp_codec.core.types import RetCode
from katcp_codec.messages.base import CodedReply, MessageBody, MessageFamily

TRACE = 5
"""stdlib level number used for :attr:`Level.TRACE`."""


class Level(enum.StrEnum):
    """KATCP log levels, from quietest to most verbose."""

    OFF = "off"
    FATAL = "fatal"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"
    ALL = "all"

    def to_logging(self) -> int:
        """Return the closest stdlib :mod:`logging` level number."""
        return _TO_LOGGING[self]

    @classmethod
    def from_logging(cls, levelno: int) -> Level:
        """Return the KATCP level for a stdlib record's ``levelno``."""
        if levelno >= logging.CRITICAL:
            return cls.FATAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


_TO_LOGGING: dict[Level, int] = {
    Level.OFF: logging.CRITICAL + 10,
    Level.FATAL: logging.CRITICAL,
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
    Level.TRACE: TRACE,
    Level.ALL: 1,
}

LEVEL: DiscreteCodec[Level] = DiscreteCodec(Level)


class Log(MessageFamily, name="log"):
    """A log record forwarded by the device."""

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        level: Level
        timestamp: datetime
        name: str
        message: str

        def to_arguments(self) -> list[str]:
            return [
                LEVEL.encode(self.level),
                TIMESTAMP.encode(self.timestamp),
                STRING.encode(self.name),
                STRING.encode(self.message),
            ]

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(
                stream.take(LEVEL, "level"),
                stream.take(TIMESTAMP, "timestamp"),
                stream.take(STRING, "name"),
                stream.take(STRING, "message"),
            )

        @classmethod
        def from_record(cls, record: logging.LogRecord) -> Self:
            """Build an inform from a stdlib :class:`logging.LogRecord`."""
            return cls(
                Level.from_logging(record.levelno),
                datetime.fromtimestamp(record.created, UTC),
                record.name,
                record.getMessage(),
            )


class LogLevel(MessageFamily, name="log-level"):
    """Query (no level) or set the device log level.

    The reply reports the level in effect afterwards.
    """

    @dataclass(frozen=True, slots=True)
    class Request(MessageBody):
        level: Level | None = None

        def to_arguments(self) -> list[str]:
            if self.level is None:
                return []
            return [LEVEL.encode(self.level)]

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(stream.take_optional(LEVEL))

    @dataclass(frozen=True, slots=True)
    class Reply(CodedReply):
        code: RetCode = RetCode.OK
        level: Level | None = None
        message: str | None = None

        def __post_init__(self) -> None:
            self._check_coded(self.level)

        @classmethod
        def ok(cls, level: Level) -> Self:
            return cls(RetCode.OK, level)

        def to_arguments(self) -> list[str]:
            payload = [LEVEL.encode(self.level)] if self.level is not None else []
            return encode_coded_result(self.code, payload, self.message)

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            result = decode_coded_result(stream, lambda s: s.take(LEVEL, "level"))
            return cls(result.code, result.payload, result.message)
