"""Composite argument conventions shared by many KATCP messages.

* **Coded result** -- a leading ``ok`` / ``invalid`` / ``fail`` code whose
  value decides what follows.
* **Count-prefixed repetition** -- an unsigned count followed by exactly
  that many fixed-shape records.
* **Type-tag-prefixed list** -- a type name selecting the codec applied to
  every remaining argument.
* **Leading-literal multiplex** -- a literal selecting one of several
  shapes, optionally with a catch-all for unknown literals.
* **Keyed verb** -- an optional verb followed by a verb-specific fixed
  number of parameters.

None of these fit a single declarative argument list: each decoder reads
a value and then branches on it.
"""
from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from katcp_codec.arguments.scalars import (
    ADDRESS,
    BOOLEAN,
    FLOAT,
    INT32,
    STRING,
    TIMESTAMP,
    UINT32,
    ArgumentCodec,
    DiscreteCodec,
)
from katcp_codec.arguments.stream import ArgumentStream
from katcp_codec.core.errors import BadArgument, FormatError
from katcp_codec.core.types import RetCode

T = TypeVar("T")
E = TypeVar("E", bound=enum.StrEnum)

RET_CODE: DiscreteCodec[RetCode] = DiscreteCodec(RetCode)


# ---------------------------------------------------------------------------
# Coded result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CodedResult(Generic[T]):
    """The decoded head of a reply.

    Attributes
    ----------
    code:
        The reply code.
    payload:
        Whatever the ``ok`` branch decoded (``None`` for shapes without a
        payload, and always ``None`` for failures).
    message:
        Human-readable failure description; ``None`` when ``code`` is ok.
    """

    code: RetCode
    payload: T | None = None
    message: str | None = None


def decode_coded_result(
    stream: ArgumentStream,
    payload: Callable[[ArgumentStream], T] | None = None,
) -> CodedResult[T]:
    """Decode a reply code and the arguments it governs.

    ``ok`` hands the stream to *payload* (if any); ``invalid`` and
    ``fail`` consume exactly one string message.  Any other code raises
    ``BadArgument``.
    """
    code = stream.take(RET_CODE, "reply code")
    if code is RetCode.OK:
        return CodedResult(code, payload(stream) if payload is not None else None)
    return CodedResult(code, message=stream.take(STRING, "reply message"))


def encode_coded_result(
    code: RetCode,
    payload: Iterable[str] = (),
    message: str | None = None,
) -> list[str]:
    """Encode a reply code followed by its payload tokens or message."""
    if code is RetCode.OK:
        return [code.value, *payload]
    if message is None:
        raise FormatError(f"A {code.value!r} reply needs a message")
    return [code.value, STRING.encode(message)]


# ---------------------------------------------------------------------------
# Count-prefixed repetition
# ---------------------------------------------------------------------------

def decode_counted(
    stream: ArgumentStream,
    record: Callable[[ArgumentStream], T],
) -> list[T]:
    """Decode an unsigned count followed by exactly that many records.

    Raises ``MissingArgument`` if the stream runs out before the last
    record is complete.
    """
    count = stream.take(UINT32, "record count")
    return [record(stream) for _ in range(count)]


def encode_counted(
    records: Iterable[T],
    record: Callable[[T], list[str]],
) -> list[str]:
    items = list(records)
    tokens = [UINT32.encode(len(items))]
    for item in items:
        tokens.extend(record(item))
    return tokens


# ---------------------------------------------------------------------------
# Type-tag-prefixed list
# ---------------------------------------------------------------------------

class ArgumentType(enum.StrEnum):
    """The scalar kinds a sensor (or other typed list) may declare."""

    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    DISCRETE = "discrete"
    ADDRESS = "address"
    STRING = "string"

    @property
    def codec(self) -> ArgumentCodec[Any]:
        """The element codec for this kind.

        Discrete values are listed as their option labels, so they use
        the string codec.
        """
        return _TYPE_CODECS[self]


_TYPE_CODECS: dict[ArgumentType, ArgumentCodec[Any]] = {
    ArgumentType.INTEGER: INT32,
    ArgumentType.FLOAT: FLOAT,
    ArgumentType.BOOLEAN: BOOLEAN,
    ArgumentType.TIMESTAMP: TIMESTAMP,
    ArgumentType.DISCRETE: STRING,
    ArgumentType.ADDRESS: ADDRESS,
    ArgumentType.STRING: STRING,
}

ARGUMENT_TYPE: DiscreteCodec[ArgumentType] = DiscreteCodec(ArgumentType)


@dataclass(frozen=True, slots=True)
class TypedValues:
    """A homogeneous list of values tagged with their scalar kind.

    Encoded as the kind's label followed by one token per value.
    """

    kind: ArgumentType
    values: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def to_arguments(self) -> list[str]:
        codec = self.kind.codec
        return [self.kind.value, *(codec.encode(value) for value in self.values)]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> TypedValues:
        """Decode a type tag and apply its codec to all remaining tokens."""
        kind = stream.take(ARGUMENT_TYPE, "type tag")
        return cls(kind, tuple(stream.take_rest(kind.codec)))


# ---------------------------------------------------------------------------
# Leading-literal multiplex
# ---------------------------------------------------------------------------

def decode_multiplexed(
    stream: ArgumentStream,
    shapes: Mapping[str, Callable[[ArgumentStream], T]],
    fallback: Callable[[str, ArgumentStream], T] | None = None,
) -> T:
    """Read a leading literal and decode the shape it selects.

    Unknown literals go to *fallback* when one is given (open sets keep
    forward compatibility); otherwise they raise ``BadArgument``.
    """
    literal = stream.take_raw("leading literal")
    shape = shapes.get(literal)
    if shape is not None:
        return shape(stream)
    if fallback is not None:
        return fallback(literal, stream)
    raise BadArgument(
        f"Unknown literal {literal!r}",
        details={"literal": literal, "expected": sorted(shapes)},
    )


# ---------------------------------------------------------------------------
# Keyed verb
# ---------------------------------------------------------------------------

def decode_keyed_verb(
    stream: ArgumentStream,
    verbs: DiscreteCodec[E],
    arity: Mapping[E, int],
    parameter: ArgumentCodec[T],
) -> tuple[E, list[T]] | None:
    """Decode an optional verb and its fixed-count parameters.

    Returns ``None`` when no verb is present.  A verb with too few
    parameters raises ``MissingArgument``; surplus tokens are left in the
    stream for :meth:`ArgumentStream.finish` to reject.
    """
    if stream.exhausted:
        return None
    verb = stream.take(verbs, "verb")
    params = [stream.take(parameter, f"{verb.value} parameter") for _ in range(arity[verb])]
    return verb, params
