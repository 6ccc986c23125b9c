"""Families for devices that serve several clients at once."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from katcp_codec.arguments.scalars import ADDRESS, Address
from katcp_codec.arguments.stream import ArgumentStream
from katcp_codec.messages.base import (
    CountReply,
    EmptyBody,
    MessageBody,
    MessageFamily,
    TextInform,
)


class ClientList(MessageFamily, name="client-list"):
    """List the addresses of every connected client."""

    @dataclass(frozen=True, slots=True)
    class Request(EmptyBody):
        pass

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        address: Address

        def to_arguments(self) -> list[str]:
            return [ADDRESS.encode(self.address)]

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(stream.take(ADDRESS, "address"))

    @dataclass(frozen=True, slots=True)
    class Reply(CountReply):
        pass


class ClientConnected(MessageFamily, name="client-connected"):
    """Sent to existing clients when another client connects."""

    @dataclass(frozen=True, slots=True)
    class Inform(TextInform):
        pass
