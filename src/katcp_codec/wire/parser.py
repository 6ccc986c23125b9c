"""KATCP line parser.

This module provides:

* :func:`parse` -- tokenize one line into a :class:`Message`.
* :func:`parse_partial` -- the composable single-message step: parse one
  message starting at an offset and report where the next one begins.
* :func:`parse_many` -- parse a chunk of complete lines.

The parser does no buffering: callers hand it complete lines (or chunks
made of complete lines).  Reassembling lines from a byte stream is the
transport's job.
"""
from __future__ import annotations

import logging

from katcp_codec.core.config import KatcpCodecConfig
from katcp_codec.core.errors import ParseError
from katcp_codec.core.types import MessageKind
from katcp_codec.wire import grammar
from katcp_codec.wire.message import Message

logger = logging.getLogger(__name__)


def _fail(text: str, pos: int, reason: str) -> ParseError:
    return ParseError(
        f"Malformed KATCP message: {reason}",
        residual=text[pos:],
        details={"offset": pos},
    )


def parse_partial(text: str, pos: int = 0) -> tuple[Message, int]:
    """Parse one message from *text* starting at offset *pos*.

    Returns
    -------
    tuple[Message, int]
        The message and the offset just past its terminator (or
        ``len(text)`` when the message ended at end of input).

    Raises
    ------
    ParseError
        If the text at *pos* does not match the grammar up to the first
        line terminator.  ``residual`` holds the unconsumed input.
    """
    if pos >= len(text) or text[pos] not in grammar.SIGILS:
        raise _fail(text, pos, "expected one of '?', '!' or '#'")
    kind = MessageKind(text[pos])
    pos += 1

    match = grammar.NAME_PATTERN.match(text, pos)
    if match is None:
        raise _fail(text, pos, "expected a message name")
    name = match.group()
    pos = match.end()

    message_id: int | None = None
    match = grammar.ID_PATTERN.match(text, pos)
    if match is not None:
        message_id = int(match.group(1))
        if message_id > grammar.MAX_MESSAGE_ID:
            raise _fail(text, pos, "message id out of range")
        pos = match.end()
    elif text.startswith("[", pos):
        raise _fail(text, pos, "malformed message id")

    arguments: list[str] = []
    while True:
        match = grammar.WS_ARGUMENT_PATTERN.match(text, pos)
        if match is None:
            break
        arguments.append(match.group(1))
        pos = match.end()

    match = grammar.WS_PATTERN.match(text, pos)
    if match is not None:
        pos = match.end()

    if pos < len(text):
        if text[pos] not in grammar.EOL_CHARS:
            raise _fail(text, pos, "expected an argument or end of line")
        pos += 1

    return Message.new_unchecked(kind, name, message_id, arguments), pos


def parse(line: str) -> Message:
    """Parse a single KATCP line.

    The line may end with LF, CR, or nothing.  Only input up to the first
    terminator is examined.

    Raises
    ------
    ParseError
        If the line does not match the grammar.
    """
    message, _ = parse_partial(line)
    return message


def parse_many(text: str, *, config: KatcpCodecConfig | None = None) -> list[Message]:
    """Parse every message in *text*, a chunk of complete lines.

    Parameters
    ----------
    text:
        One or more lines, each terminated by CR or LF (the last line may
        be unterminated).  A CR LF pair yields an empty line between the
        two terminators, which is skipped like any other blank line.
    config:
        Controls blank-line handling and the maximum line length.
        Defaults to :class:`KatcpCodecConfig` defaults.

    Raises
    ------
    ParseError
        On the first line that is malformed, too long, or blank while
        ``skip_blank_lines`` is disabled.
    """
    cfg = config or KatcpCodecConfig()
    messages: list[Message] = []
    pos = 0
    while pos < len(text):
        end = _line_end(text, pos)
        line = text[pos:end]
        if not line.strip(" \t"):
            if not cfg.skip_blank_lines:
                raise _fail(text, pos, "blank line")
            logger.debug("Skipping blank line at offset %d", pos)
            pos = end + 1
            continue
        if len(line) > cfg.max_line_length:
            raise ParseError(
                f"Line of {len(line)} characters exceeds maximum "
                f"{cfg.max_line_length}",
                residual=text[pos:],
                details={"offset": pos, "length": len(line)},
            )
        message, pos = parse_partial(text, pos)
        messages.append(message)
    return messages


def _line_end(text: str, pos: int) -> int:
    """Return the offset of the first CR or LF at or after *pos*."""
    ends = [i for i in (text.find("\r", pos), text.find("\n", pos)) if i != -1]
    return min(ends) if ends else len(text)
