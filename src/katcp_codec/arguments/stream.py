"""Left-to-right cursor over a message's argument tokens."""
from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from katcp_codec.arguments.scalars import ArgumentCodec
from katcp_codec.core.errors import BadArgument, MissingArgument
from katcp_codec.wire.escaping import EMPTY_SENTINEL

T = TypeVar("T")


class ArgumentStream:
    """Consumes argument tokens in order, decoding each with a codec.

    Message decoders are written as explicit left-to-right state machines
    over one of these: later shapes may depend on values decoded earlier
    (a reply code, a strategy verb, a type tag, a count).
    """

    __slots__ = ("_tokens", "_pos")

    def __init__(self, tokens: Iterable[str]) -> None:
        self._tokens: tuple[str, ...] = tuple(tokens)
        self._pos = 0

    @property
    def position(self) -> int:
        """Index of the next token to be consumed."""
        return self._pos

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def __len__(self) -> int:
        """Number of tokens not yet consumed."""
        return len(self._tokens) - self._pos

    def peek(self) -> str | None:
        """Return the next raw token without consuming it."""
        if self.exhausted:
            return None
        return self._tokens[self._pos]

    def take_raw(self, what: str = "argument") -> str:
        """Consume and return the next raw token.

        Raises
        ------
        MissingArgument
            If no tokens remain.
        """
        if self.exhausted:
            raise MissingArgument(
                f"Missing {what} at position {self._pos}",
                details={"position": self._pos, "expected": what},
            )
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def take(self, codec: ArgumentCodec[T], what: str | None = None) -> T:
        """Consume the next token and decode it with *codec*."""
        return codec.decode(self.take_raw(what or codec.type_name))

    def take_optional(self, codec: ArgumentCodec[T]) -> T | None:
        """Decode an optional trailing token.

        Returns ``None`` when the stream is exhausted or the token is the
        ``\\@`` sentinel.
        """
        if self.exhausted:
            return None
        token = self.take_raw()
        if token == EMPTY_SENTINEL:
            return None
        return codec.decode(token)

    def take_rest(self, codec: ArgumentCodec[T]) -> list[T]:
        """Decode every remaining token with *codec*."""
        values = [codec.decode(token) for token in self._tokens[self._pos:]]
        self._pos = len(self._tokens)
        return values

    def finish(self) -> None:
        """Assert that every token has been consumed.

        Raises
        ------
        BadArgument
            If tokens remain; a shape never silently drops arguments.
        """
        if not self.exhausted:
            extra = self._tokens[self._pos:]
            raise BadArgument(
                f"{len(extra)} unexpected trailing argument(s)",
                details={"position": self._pos, "extra": list(extra)},
            )
