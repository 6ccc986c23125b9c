"""Message family machinery.

A *family* is every message sharing one wire name, e.g. ``?help``,
``!help`` and ``#help``.  Each family is declared as a
:class:`MessageFamily` subclass with up to three nested role classes
named ``Request``, ``Reply`` and ``Inform``::

    class Watchdog(MessageFamily, name="watchdog"):
        @dataclass(frozen=True, slots=True)
        class Request(EmptyBody):
            pass

        @dataclass(frozen=True, slots=True)
        class Reply(GenericReply):
            pass

Declaring the family stamps each role with its wire name and kind, and
registers the family for name-based dispatch through
:func:`decode_message`.

Role classes are frozen dataclasses implementing
:meth:`MessageBody.to_arguments` and :meth:`MessageBody.from_arguments`;
the latter is a left-to-right decoder over an
:class:`~katcp_codec.arguments.stream.ArgumentStream`.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Self

from katcp_codec.arguments.composites import decode_coded_result, encode_coded_result
from katcp_codec.arguments.scalars import STRING, UINT32
from katcp_codec.arguments.stream import ArgumentStream
from katcp_codec.core.errors import IncorrectType
from katcp_codec.core.types import MessageKind, RetCode
from katcp_codec.wire import grammar
from katcp_codec.wire.message import Message
from katcp_codec.wire.parser import parse

logger = logging.getLogger(__name__)

_ROLE_KINDS: dict[str, MessageKind] = {
    "Request": MessageKind.REQUEST,
    "Reply": MessageKind.REPLY,
    "Inform": MessageKind.INFORM,
}

_REGISTRY: dict[str, type[MessageFamily]] = {}


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

class MessageBody(ABC):
    """One role (request, reply or inform) of a message family.

    ``NAME`` and ``KIND`` are assigned when the enclosing
    :class:`MessageFamily` is declared.
    """

    __slots__ = ()

    NAME: ClassVar[str]
    KIND: ClassVar[MessageKind]
    family: ClassVar[type[MessageFamily]]

    @abstractmethod
    def to_arguments(self) -> list[str]:
        """Encode this body as a list of escaped wire tokens."""

    @classmethod
    @abstractmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        """Decode a body from *stream*, consuming exactly its arguments."""

    def to_message(self, id: int | None = None) -> Message:
        """Build the wire :class:`Message` for this body."""
        return Message.new_unchecked(self.KIND, self.NAME, id, self.to_arguments())

    def serialize(self, id: int | None = None) -> str:
        return self.to_message(id).serialize()

    @classmethod
    def from_message(cls, message: Message) -> Self:
        """Decode *message* into this role.

        Raises
        ------
        IncorrectType
            If the message name or kind is not this role's.
        MissingArgument, BadArgument
            If the arguments do not fit the role's shape, including
            leftover arguments after the shape is complete.
        """
        if message.name != cls.NAME or message.kind is not cls.KIND:
            raise IncorrectType(
                f"Expected {cls.KIND.sigil}{cls.NAME}, "
                f"got {message.kind.sigil}{message.name}",
                details={"expected": cls.NAME, "received": message.name},
            )
        stream = ArgumentStream(message.arguments)
        body = cls.from_arguments(stream)
        stream.finish()
        return body

    @classmethod
    def from_line(cls, line: str) -> Self:
        """Parse *line* and decode it into this role."""
        return cls.from_message(parse(line))


@dataclass(frozen=True, slots=True)
class EmptyBody(MessageBody):
    """A role without arguments."""

    def to_arguments(self) -> list[str]:
        return []

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        return cls()


@dataclass(frozen=True, slots=True)
class OptionalNameRequest(MessageBody):
    """A request with one optional name filter.

    ``None`` is sent as a request without arguments.
    """

    name: str | None = None

    def to_arguments(self) -> list[str]:
        if self.name is None:
            return []
        return [STRING.encode(self.name)]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        return cls(stream.take_optional(STRING))


@dataclass(frozen=True, slots=True)
class TextInform(MessageBody):
    """An inform carrying one free-text message."""

    message: str

    def to_arguments(self) -> list[str]:
        return [STRING.encode(self.message)]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        return cls(stream.take(STRING, "message"))


# ---------------------------------------------------------------------------
# Coded replies
# ---------------------------------------------------------------------------

class CodedReply(MessageBody):
    """Base for replies whose first argument is a :class:`RetCode`.

    Subclasses are dataclasses with a ``code`` field, their ``ok``
    payload fields (defaulting to ``None``) and a trailing ``message``
    field used by failures.
    """

    __slots__ = ()

    code: RetCode
    message: str | None

    @classmethod
    def fail(cls, message: str) -> Self:
        return cls(code=RetCode.FAIL, message=message)

    @classmethod
    def invalid(cls, message: str) -> Self:
        return cls(code=RetCode.INVALID, message=message)

    @property
    def is_ok(self) -> bool:
        return self.code is RetCode.OK

    def _check_coded(self, *payload: object) -> None:
        if self.is_ok:
            if self.message is not None:
                raise ValueError("an ok reply carries no failure message")
            if any(value is None for value in payload):
                raise ValueError("an ok reply needs its payload")
        else:
            if self.message is None:
                raise ValueError(f"a {self.code.value!r} reply needs a message")
            if any(value is not None for value in payload):
                raise ValueError(f"a {self.code.value!r} reply carries no payload")


@dataclass(frozen=True, slots=True)
class GenericReply(CodedReply):
    """``ok`` with no payload, or a failure code with a message."""

    code: RetCode = RetCode.OK
    message: str | None = None

    def __post_init__(self) -> None:
        self._check_coded()

    @classmethod
    def ok(cls) -> Self:
        return cls()

    def to_arguments(self) -> list[str]:
        return encode_coded_result(self.code, (), self.message)

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        result = decode_coded_result(stream)
        return cls(result.code, result.message)


@dataclass(frozen=True, slots=True)
class CountReply(CodedReply):
    """``ok`` followed by the number of informs sent, or a failure."""

    code: RetCode = RetCode.OK
    count: int | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        self._check_coded(self.count)

    @classmethod
    def ok(cls, count: int) -> Self:
        return cls(RetCode.OK, count)

    def to_arguments(self) -> list[str]:
        payload = [UINT32.encode(self.count)] if self.count is not None else []
        return encode_coded_result(self.code, payload, self.message)

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        result = decode_coded_result(stream, lambda s: s.take(UINT32, "count"))
        return cls(result.code, result.payload, result.message)


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------

class MessageFamily:
    """All roles of one named message.

    Subclasses pass the wire name as a class keyword and nest their role
    classes as ``Request``, ``Reply`` and/or ``Inform``.
    """

    NAME: ClassVar[str]
    Request: ClassVar[type[MessageBody] | None] = None
    Reply: ClassVar[type[MessageBody] | None] = None
    Inform: ClassVar[type[MessageBody] | None] = None

    def __init_subclass__(cls, *, name: str, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if not grammar.is_valid_name(name):
            raise ValueError(f"invalid KATCP message name: {name!r}")
        if name in _REGISTRY:
            raise ValueError(f"message family {name!r} is already registered")
        cls.NAME = name
        for attr, kind in _ROLE_KINDS.items():
            role = cls.__dict__.get(attr)
            if role is None:
                continue
            role.NAME = name
            role.KIND = kind
            role.family = cls
        _REGISTRY[name] = cls

    @classmethod
    def roles(cls) -> dict[MessageKind, type[MessageBody]]:
        """Return the declared roles keyed by message kind."""
        roles: dict[MessageKind, type[MessageBody]] = {}
        for attr, kind in _ROLE_KINDS.items():
            role = getattr(cls, attr)
            if role is not None:
                roles[kind] = role
        return roles

    @classmethod
    def from_message(cls, message: Message) -> MessageBody:
        """Decode *message* into whichever role its kind selects.

        Raises
        ------
        IncorrectType
            If the name differs or the family has no role of that kind.
        """
        if message.name != cls.NAME:
            raise IncorrectType(
                f"Expected a {cls.NAME!r} message, got {message.name!r}",
                details={"expected": cls.NAME, "received": message.name},
            )
        role = cls.roles().get(message.kind)
        if role is None:
            raise IncorrectType(
                f"{cls.NAME!r} has no {message.kind.name.lower()} form",
                details={"name": cls.NAME, "kind": message.kind.value},
            )
        return role.from_message(message)

    @classmethod
    def from_line(cls, line: str) -> MessageBody:
        return cls.from_message(parse(line))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def message_family(name: str) -> type[MessageFamily]:
    """Return the family registered under the wire name *name*.

    Raises
    ------
    IncorrectType
        If no family has that name.
    """
    family = _REGISTRY.get(name)
    if family is None:
        raise IncorrectType(
            f"No message family named {name!r}",
            details={"name": name},
        )
    return family


def registered_families() -> dict[str, type[MessageFamily]]:
    """Return a snapshot of the name -> family registry."""
    return dict(_REGISTRY)


def decode_message(message: Message) -> MessageBody:
    """Decode *message* with the family registered for its name."""
    try:
        family = message_family(message.name)
    except IncorrectType:
        logger.debug("No family registered for %r", message.name)
        raise
    return family.from_message(message)
