"""Core KATCP families: lifecycle, help, versions and interface changes."""
from __future__ import annotations

import enum
import platform
import re
from dataclasses import dataclass
from typing import Self

from katcp_codec.arguments.composites import decode_multiplexed
from katcp_codec.arguments.scalars import STRING, DiscreteCodec
from katcp_codec.arguments.stream import ArgumentStream
from katcp_codec.core.config import KatcpCodecConfig
from katcp_codec.core.errors import BadArgument
from katcp_codec.messages.base import (
    CountReply,
    EmptyBody,
    GenericReply,
    MessageBody,
    MessageFamily,
    OptionalNameRequest,
    TextInform,
)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class Halt(MessageFamily, name="halt"):
    """Ask the device to shut down."""

    @dataclass(frozen=True, slots=True)
    class Request(EmptyBody):
        pass

    @dataclass(frozen=True, slots=True)
    class Reply(GenericReply):
        pass


class Restart(MessageFamily, name="restart"):
    """Ask the device to restart."""

    @dataclass(frozen=True, slots=True)
    class Request(EmptyBody):
        pass

    @dataclass(frozen=True, slots=True)
    class Reply(GenericReply):
        pass


class Watchdog(MessageFamily, name="watchdog"):
    """Connection liveness check."""

    @dataclass(frozen=True, slots=True)
    class Request(EmptyBody):
        pass

    @dataclass(frozen=True, slots=True)
    class Reply(GenericReply):
        pass


class Disconnect(MessageFamily, name="disconnect"):
    """Sent by a device just before it closes the connection."""

    @dataclass(frozen=True, slots=True)
    class Inform(TextInform):
        pass


# ---------------------------------------------------------------------------
# Help and version list
# ---------------------------------------------------------------------------

class Help(MessageFamily, name="help"):
    """Request descriptions, optionally for a single request name.

    The device answers with one inform per request followed by a reply
    counting them.
    """

    @dataclass(frozen=True, slots=True)
    class Request(OptionalNameRequest):
        pass

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        name: str
        description: str

        def to_arguments(self) -> list[str]:
            return [STRING.encode(self.name), STRING.encode(self.description)]

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(stream.take(STRING, "name"), stream.take(STRING, "description"))

    @dataclass(frozen=True, slots=True)
    class Reply(CountReply):
        pass


class VersionList(MessageFamily, name="version-list"):
    """Enumerate the versioned components of a device."""

    @dataclass(frozen=True, slots=True)
    class Request(EmptyBody):
        pass

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        name: str
        version: str
        unique_id: str

        def to_arguments(self) -> list[str]:
            return [
                STRING.encode(self.name),
                STRING.encode(self.version),
                STRING.encode(self.unique_id),
            ]

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(
                stream.take(STRING, "name"),
                stream.take(STRING, "version"),
                stream.take(STRING, "unique id"),
            )

    @dataclass(frozen=True, slots=True)
    class Reply(CountReply):
        pass


# ---------------------------------------------------------------------------
# Version connect
# ---------------------------------------------------------------------------

class ProtocolFlag(enum.StrEnum):
    """Optional protocol features advertised after the version number."""

    MULTI_CLIENT = "M"
    MESSAGE_IDS = "I"
    TIMEOUT_HINTS = "T"
    BULK_SAMPLING = "B"


_PROTOCOL_VERSION = re.compile(r"([0-9]{1,9})\.([0-9]{1,9})(?:-(.*))?")


@dataclass(frozen=True, slots=True)
class ProtocolVersion:
    """``katcp-protocol major.minor[-FLAGS]``."""

    LITERAL = "katcp-protocol"

    major: int
    minor: int
    flags: frozenset[ProtocolFlag] = frozenset()

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0:
            raise ValueError("protocol version numbers are non-negative")
        object.__setattr__(self, "flags", frozenset(ProtocolFlag(f) for f in self.flags))

    def to_arguments(self) -> list[str]:
        version = f"{self.major}.{self.minor}"
        if self.flags:
            version += "-" + "".join(f.value for f in ProtocolFlag if f in self.flags)
        return [self.LITERAL, version]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> ProtocolVersion:
        token = stream.take(STRING, "protocol version")
        match = _PROTOCOL_VERSION.fullmatch(token)
        if match is None:
            raise BadArgument(
                f"Malformed protocol version {token!r}",
                details={"token": token},
            )
        flags = set()
        for char in match.group(3) or "":
            try:
                flags.add(ProtocolFlag(char))
            except ValueError:
                raise BadArgument(
                    f"Unknown protocol flag {char!r}",
                    details={"token": token, "flag": char},
                ) from None
        return cls(int(match.group(1)), int(match.group(2)), frozenset(flags))


@dataclass(frozen=True, slots=True)
class LibraryVersion:
    """``katcp-library version build-state``."""

    LITERAL = "katcp-library"

    version: str
    build_state: str

    def to_arguments(self) -> list[str]:
        return [self.LITERAL, STRING.encode(self.version), STRING.encode(self.build_state)]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> LibraryVersion:
        return cls(stream.take(STRING, "version"), stream.take(STRING, "build state"))


@dataclass(frozen=True, slots=True)
class DeviceVersion:
    """``katcp-device api-version build-state``.

    Older device libraries insert a device address between the two fields;
    that form is not accepted and fails on the surplus argument.
    """

    LITERAL = "katcp-device"

    api_version: str
    build_state: str

    def to_arguments(self) -> list[str]:
        return [
            self.LITERAL,
            STRING.encode(self.api_version),
            STRING.encode(self.build_state),
        ]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> DeviceVersion:
        return cls(stream.take(STRING, "api version"), stream.take(STRING, "build state"))


@dataclass(frozen=True, slots=True)
class CustomVersion:
    """Any other component: ``name version [info]``."""

    name: str
    version: str
    info: str | None = None

    def __post_init__(self) -> None:
        if self.name in _VERSION_SHAPES:
            raise ValueError(f"{self.name!r} is a reserved component name")
        if not self.name:
            raise ValueError("component name must not be empty")

    def to_arguments(self) -> list[str]:
        tokens = [STRING.encode(self.name), STRING.encode(self.version)]
        if self.info is not None:
            tokens.append(STRING.encode(self.info))
        return tokens

    @classmethod
    def from_literal(cls, literal: str, stream: ArgumentStream) -> CustomVersion:
        name = STRING.decode(literal)
        if not name:
            raise BadArgument(
                "Version component name must not be empty",
                details={"literal": literal},
            )
        return cls(
            name,
            stream.take(STRING, "version"),
            stream.take_optional(STRING),
        )


Component = ProtocolVersion | LibraryVersion | DeviceVersion | CustomVersion

_VERSION_SHAPES = {
    ProtocolVersion.LITERAL: ProtocolVersion.from_arguments,
    LibraryVersion.LITERAL: LibraryVersion.from_arguments,
    DeviceVersion.LITERAL: DeviceVersion.from_arguments,
}


class VersionConnect(MessageFamily, name="version-connect"):
    """Version information sent to every client on connect."""

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        component: Component

        def to_arguments(self) -> list[str]:
            return self.component.to_arguments()

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(
                decode_multiplexed(stream, _VERSION_SHAPES, CustomVersion.from_literal)
            )

    @classmethod
    def protocol(cls, config: KatcpCodecConfig | None = None) -> VersionConnect.Inform:
        """The ``katcp-protocol`` inform for the configured protocol version."""
        config = config or KatcpCodecConfig()
        return cls.Inform(
            ProtocolVersion(
                config.protocol_major,
                config.protocol_minor,
                frozenset(ProtocolFlag(f) for f in config.protocol_flags),
            )
        )

    @classmethod
    def library(cls) -> VersionConnect.Inform:
        """The ``katcp-library`` inform describing this package."""
        from katcp_codec import __version__

        return cls.Inform(
            LibraryVersion(
                f"katcp-codec-{__version__}",
                f"python-{platform.python_version()}",
            )
        )


# ---------------------------------------------------------------------------
# Interface changed
# ---------------------------------------------------------------------------

class ChangeTarget(enum.StrEnum):
    SENSOR_LIST = "sensor-list"
    REQUEST_LIST = "request-list"
    SENSOR = "sensor"
    REQUEST = "request"


class ChangeAction(enum.StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


CHANGE_ACTION: DiscreteCodec[ChangeAction] = DiscreteCodec(ChangeAction)

_NAMED_TARGETS = frozenset({ChangeTarget.SENSOR, ChangeTarget.REQUEST})


@dataclass(frozen=True, slots=True)
class InterfaceChange:
    """What changed on the device interface.

    Whole-list targets carry no name or action; single sensor and request
    targets carry both.
    """

    target: ChangeTarget
    name: str | None = None
    action: ChangeAction | None = None

    def __post_init__(self) -> None:
        named = self.target in _NAMED_TARGETS
        if named and (self.name is None or self.action is None):
            raise ValueError(f"a {self.target.value!r} change needs a name and action")
        if not named and (self.name is not None or self.action is not None):
            raise ValueError(f"a {self.target.value!r} change has no name or action")

    def to_arguments(self) -> list[str]:
        if self.target in _NAMED_TARGETS:
            return [
                self.target.value,
                STRING.encode(self.name),
                CHANGE_ACTION.encode(self.action),
            ]
        return [self.target.value]

    @classmethod
    def _named(cls, target: ChangeTarget):
        def decode(stream: ArgumentStream) -> InterfaceChange:
            return cls(target, stream.take(STRING, "name"), stream.take(CHANGE_ACTION, "action"))

        return decode


_CHANGE_SHAPES = {
    ChangeTarget.SENSOR_LIST.value: lambda stream: InterfaceChange(ChangeTarget.SENSOR_LIST),
    ChangeTarget.REQUEST_LIST.value: lambda stream: InterfaceChange(ChangeTarget.REQUEST_LIST),
    ChangeTarget.SENSOR.value: InterfaceChange._named(ChangeTarget.SENSOR),
    ChangeTarget.REQUEST.value: InterfaceChange._named(ChangeTarget.REQUEST),
}


class InterfaceChanged(MessageFamily, name="interface-changed"):
    """Announces that requests or sensors were added, removed or modified.

    With no arguments the whole interface should be re-read.
    """

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        change: InterfaceChange | None = None

        def to_arguments(self) -> list[str]:
            if self.change is None:
                return []
            return self.change.to_arguments()

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            if stream.exhausted:
                return cls()
            return cls(decode_multiplexed(stream, _CHANGE_SHAPES))
