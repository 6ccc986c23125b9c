"""The canonical KATCP message model.

This module provides:

* **Message** -- the immutable ``{kind, name, id, arguments}`` value every
  other layer produces or consumes.
* **Serialisation** -- :meth:`Message.serialize` renders the exact wire
  line, terminated by a single LF.
* **Error replies** -- :func:`format_error_reply` turns a
  :class:`~katcp_codec.core.errors.KatcpError` into the reply a device
  sends for a request it could not handle.

Arguments are stored *already escaped*: they are wire tokens, not the
values they represent.  Converting values to tokens is the job of
:mod:`katcp_codec.arguments`.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from katcp_codec.core.errors import KatcpError, ParseError
from katcp_codec.core.types import MessageKind
from katcp_codec.wire import grammar
from katcp_codec.wire.escaping import escape


class GrammarViolation(ValueError):
    """A name or argument rejected by the grammar, with its residual."""

    def __init__(self, message: str, residual: str) -> None:
        super().__init__(message)
        self.residual = residual


class Message(BaseModel):
    """A single KATCP message.

    Construct through :meth:`new` to have the name and every argument
    checked against the grammar, or through :meth:`new_unchecked` when
    the producer already guarantees validity (the parser and the message
    families do).  Instances are frozen, hashable, and compare equal when
    all four fields are equal.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    kind: MessageKind
    name: str
    id: int | None = Field(default=None, gt=0, le=grammar.MAX_MESSAGE_ID)
    arguments: tuple[str, ...] = ()

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        residual = grammar.name_residual(value)
        if residual is not None:
            raise GrammarViolation(f"invalid message name {value!r}", residual)
        return value

    @field_validator("arguments")
    @classmethod
    def _check_arguments(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for index, argument in enumerate(value):
            residual = grammar.argument_residual(argument)
            if residual is not None:
                raise GrammarViolation(
                    f"invalid argument {index}: {argument!r}", residual
                )
        return value

    # -- Constructors --------------------------------------------------------

    @classmethod
    def new(
        cls,
        kind: MessageKind,
        name: str,
        id: int | None = None,
        arguments: Iterable[str] = (),
    ) -> Message:
        """Build a message, validating it against the grammar.

        Raises
        ------
        ParseError
            If the name or any argument does not match its grammar
            production, or the kind / id are not valid.
        """
        try:
            return cls(kind=kind, name=name, id=id, arguments=tuple(arguments))
        except ValidationError as exc:
            first = exc.errors()[0]
            raise ParseError(
                f"Invalid message: {first['msg']}",
                residual=_residual_of(exc),
                details={"field": ".".join(str(p) for p in first["loc"])},
            ) from exc

    @classmethod
    def new_unchecked(
        cls,
        kind: MessageKind,
        name: str,
        id: int | None = None,
        arguments: Iterable[str] = (),
    ) -> Message:
        """Build a message without validation.

        The caller guarantees that *name* and *arguments* satisfy the
        grammar; serialising an invalid unchecked message produces a line
        that will not parse back.
        """
        return cls.model_construct(kind=kind, name=name, id=id, arguments=tuple(arguments))

    @classmethod
    def from_line(cls, line: str) -> Message:
        """Parse a single wire line.  Equivalent to :func:`~katcp_codec.wire.parser.parse`."""
        from katcp_codec.wire.parser import parse

        return parse(line)

    # -- Serialisation -------------------------------------------------------

    def serialize(self) -> str:
        """Render the message as one wire line terminated by LF."""
        id_str = f"[{self.id}]" if self.id is not None else ""
        args = "".join(" " + argument for argument in self.arguments)
        return f"{self.kind.sigil}{self.name}{id_str}{args}\n"

    def __str__(self) -> str:
        return self.serialize()


def _residual_of(exc: ValidationError) -> str:
    for error in exc.errors():
        cause: Any = (error.get("ctx") or {}).get("error")
        if isinstance(cause, GrammarViolation):
            return cause.residual
    return ""


# ---------------------------------------------------------------------------
# Error replies
# ---------------------------------------------------------------------------

def format_error_reply(request: Message, error: KatcpError) -> Message:
    """Build the reply a device sends when *request* fails with *error*.

    The reply carries the request's name and id, the error's reply code
    (``invalid`` for malformed requests, ``fail`` otherwise) and the
    escaped error message.
    """
    return Message.new_unchecked(
        MessageKind.REPLY,
        request.name,
        request.id,
        [error.ret_code.value, escape(error.message)],
    )
