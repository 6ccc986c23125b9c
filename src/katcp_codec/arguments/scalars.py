"""KATCP scalar argument codecs.

Each codec converts between one Python value and one wire token:

=============  ==================  ======================================
codec          Python value        wire form
=============  ==================  ======================================
``STRING``     ``str``             escaped text, ``\\@`` for ``""``
``INT32``      ``int``             signed decimal, 32-bit range
``UINT32``     ``int``             unsigned decimal, 32-bit range
``BOOLEAN``    ``bool``            ``1`` / ``0``
``FLOAT``      ``float``           decimal or scientific notation
``TIMESTAMP``  aware ``datetime``  ``seconds[.fraction]`` since the epoch
``ADDRESS``    :class:`Address`    ``a.b.c.d[:port]`` / ``[v6][:port]``
discrete       ``StrEnum`` member  kebab-case label
optional       value or ``None``   ``\\@`` when absent
=============  ==================  ======================================

``decode`` raises :class:`~katcp_codec.core.errors.BadArgument`;
``encode`` raises :class:`~katcp_codec.core.errors.FormatError` for
values outside the codec's domain.
"""
from __future__ import annotations

import enum
import ipaddress
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Generic, TypeVar

from katcp_codec.core.errors import BadArgument, FormatError
from katcp_codec.wire.escaping import EMPTY_SENTINEL, escape, unescape

T = TypeVar("T")
E = TypeVar("E", bound=enum.StrEnum)

EPOCH: datetime = datetime(1970, 1, 1, tzinfo=UTC)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class ArgumentCodec(ABC, Generic[T]):
    """Converts values of one type to and from single wire tokens."""

    type_name: str = "argument"

    @abstractmethod
    def encode(self, value: T) -> str:
        """Render *value* as one escaped wire token."""

    @abstractmethod
    def decode(self, token: str) -> T:
        """Parse one wire token, raising ``BadArgument`` on failure."""

    def _bad(self, token: str, reason: str | None = None) -> BadArgument:
        text = f"Cannot decode {token!r} as {self.type_name}"
        if reason:
            text = f"{text}: {reason}"
        return BadArgument(text, details={"token": token, "type": self.type_name})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type_name}>"


# ---------------------------------------------------------------------------
# String
# ---------------------------------------------------------------------------

class StringCodec(ArgumentCodec[str]):
    type_name = "string"

    def encode(self, value: str) -> str:
        if not isinstance(value, str):
            raise FormatError(f"Expected str, got {type(value).__name__}")
        return escape(value)

    def decode(self, token: str) -> str:
        return unescape(token)


# ---------------------------------------------------------------------------
# Integer
# ---------------------------------------------------------------------------

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"\+?[0-9]+")


class IntegerCodec(ArgumentCodec[int]):
    """Decimal integers limited to a fixed-width signed or unsigned range."""

    def __init__(self, bits: int = 32, *, signed: bool = True) -> None:
        self.signed = signed
        if signed:
            self.minimum = -(1 << (bits - 1))
            self.maximum = (1 << (bits - 1)) - 1
            self._pattern = _SIGNED_INT
        else:
            self.minimum = 0
            self.maximum = (1 << bits) - 1
            self._pattern = _UNSIGNED_INT
        self.type_name = f"{'i' if signed else 'u'}{bits}"

    def encode(self, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise FormatError(f"Expected int, got {type(value).__name__}")
        if not self.minimum <= value <= self.maximum:
            raise FormatError(
                f"{value} is outside the {self.type_name} range",
                details={"value": value},
            )
        return str(value)

    def decode(self, token: str) -> int:
        if self._pattern.fullmatch(token) is None:
            raise self._bad(token)
        try:
            value = int(token)
        except ValueError:
            raise self._bad(token, "out of range") from None
        if not self.minimum <= value <= self.maximum:
            raise self._bad(token, "out of range")
        return value


# ---------------------------------------------------------------------------
# Boolean
# ---------------------------------------------------------------------------

class BooleanCodec(ArgumentCodec[bool]):
    type_name = "boolean"

    def encode(self, value: bool) -> str:
        if not isinstance(value, bool):
            raise FormatError(f"Expected bool, got {type(value).__name__}")
        return "1" if value else "0"

    def decode(self, token: str) -> bool:
        if token == "1":
            return True
        if token == "0":
            return False
        raise self._bad(token)


# ---------------------------------------------------------------------------
# Float
# ---------------------------------------------------------------------------

_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class FloatCodec(ArgumentCodec[float]):
    """Floating point values in decimal or scientific notation.

    Non-finite values have no KATCP representation.
    """

    type_name = "float"

    def encode(self, value: float) -> str:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise FormatError(f"Expected float, got {type(value).__name__}")
        if not math.isfinite(value):
            raise FormatError(f"{value} is not a finite float")
        return repr(float(value))

    def decode(self, token: str) -> float:
        if _FLOAT.fullmatch(token) is None:
            raise self._bad(token)
        value = float(token)
        if not math.isfinite(value):
            raise self._bad(token, "overflow")
        return value


# ---------------------------------------------------------------------------
# Timestamp
# ---------------------------------------------------------------------------

_TIMESTAMP = re.compile(r"([0-9]+)(?:\.([0-9]*))?")
_MICROS = Decimal(1_000_000)


class TimestampCodec(ArgumentCodec[datetime]):
    """Seconds since the Unix epoch with an optional fractional part.

    The fractional digits are parsed at full precision and rounded
    (half-even) to the microsecond resolution of :class:`datetime`.
    """

    type_name = "timestamp"

    def encode(self, value: datetime) -> str:
        if not isinstance(value, datetime):
            raise FormatError(f"Expected datetime, got {type(value).__name__}")
        if value.tzinfo is None:
            raise FormatError("Timestamps must be timezone-aware")
        delta = value - EPOCH
        if delta < timedelta(0):
            raise FormatError(f"{value.isoformat()} is before the Unix epoch")
        seconds = delta.days * 86_400 + delta.seconds
        if not delta.microseconds:
            return str(seconds)
        return f"{seconds}.{delta.microseconds:06d}".rstrip("0")

    def decode(self, token: str) -> datetime:
        match = _TIMESTAMP.fullmatch(token)
        if match is None:
            raise self._bad(token)
        try:
            seconds = int(match.group(1))
        except ValueError:
            raise self._bad(token, "out of range") from None
        fraction = match.group(2) or "0"
        micros = int(
            (Decimal("0." + fraction) * _MICROS).quantize(Decimal(1), ROUND_HALF_EVEN)
        )
        try:
            return EPOCH + timedelta(seconds=seconds, microseconds=micros)
        except OverflowError as exc:
            raise self._bad(token, "out of range") from exc


# ---------------------------------------------------------------------------
# Address
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Address:
    """An IP address with an optional port.

    Attributes
    ----------
    host:
        IPv4 or IPv6 address.
    port:
        TCP/UDP port, or ``None`` for a bare address.
    """

    host: IPAddress
    port: int | None = None

    def __post_init__(self) -> None:
        if self.port is not None and not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"port {self.port} out of range")

    @classmethod
    def parse(cls, text: str) -> Address:
        """Parse an address token (see :class:`AddressCodec`)."""
        return ADDRESS.decode(text)

    def __str__(self) -> str:
        host = str(self.host)
        if self.host.version == 6:
            host = f"[{host}]"
        if self.port is None:
            return host
        return f"{host}:{self.port}"


_V4_SOCKET = re.compile(r"([0-9.]+):([0-9]{1,5})")
_V6_SOCKET = re.compile(r"\[([^\[\]]+)\]:([0-9]{1,5})")
_V6_BRACKETED = re.compile(r"\[([^\[\]]+)\]")


class AddressCodec(ArgumentCodec[Address]):
    """IPv4 / IPv6 addresses, optionally with a port.

    Decoding tries, in order: a socket address (``a.b.c.d:port`` or
    ``[v6]:port``), a bare IP address, and a bracketed bare IPv6 address.
    """

    type_name = "address"

    def encode(self, value: Address) -> str:
        if not isinstance(value, Address):
            raise FormatError(f"Expected Address, got {type(value).__name__}")
        return str(value)

    def decode(self, token: str) -> Address:
        if not token:
            raise self._bad(token, "empty address")
        address = self._socket_address(token)
        if address is not None:
            return address
        try:
            return Address(ipaddress.ip_address(token))
        except ValueError:
            pass
        match = _V6_BRACKETED.fullmatch(token)
        if match is not None:
            try:
                return Address(ipaddress.IPv6Address(match.group(1)))
            except ValueError:
                pass
        raise self._bad(token)

    @staticmethod
    def _socket_address(token: str) -> Address | None:
        for pattern, factory in (
            (_V4_SOCKET, ipaddress.IPv4Address),
            (_V6_SOCKET, ipaddress.IPv6Address),
        ):
            match = pattern.fullmatch(token)
            if match is None:
                continue
            port = int(match.group(2))
            if port > 0xFFFF:
                return None
            try:
                return Address(factory(match.group(1)), port)
            except ValueError:
                return None
        return None


# ---------------------------------------------------------------------------
# Discrete and optional
# ---------------------------------------------------------------------------

class DiscreteCodec(ArgumentCodec[E]):
    """Labels drawn from a closed set, modelled as a ``StrEnum``."""

    def __init__(self, enum_type: type[E]) -> None:
        self.enum_type = enum_type
        self.type_name = f"discrete {enum_type.__name__}"

    def encode(self, value: E) -> str:
        if not isinstance(value, self.enum_type):
            raise FormatError(
                f"Expected {self.enum_type.__name__}, got {type(value).__name__}"
            )
        return value.value

    def decode(self, token: str) -> E:
        try:
            return self.enum_type(token)
        except ValueError:
            raise self._bad(
                token, f"expected one of {', '.join(m.value for m in self.enum_type)}"
            ) from None


class OptionalCodec(ArgumentCodec[T | None]):
    """Wraps another codec; ``None`` travels as the ``\\@`` sentinel.

    An optional string holding ``""`` is indistinguishable from ``None``
    on the wire and decodes as ``None``.
    """

    def __init__(self, inner: ArgumentCodec[T]) -> None:
        self.inner = inner
        self.type_name = f"optional {inner.type_name}"

    def encode(self, value: T | None) -> str:
        if value is None:
            return EMPTY_SENTINEL
        return self.inner.encode(value)

    def decode(self, token: str) -> T | None:
        if token == EMPTY_SENTINEL:
            return None
        return self.inner.decode(token)


# ---------------------------------------------------------------------------
# Shared instances
# ---------------------------------------------------------------------------

STRING = StringCodec()
INT32 = IntegerCodec(32, signed=True)
UINT32 = IntegerCodec(32, signed=False)
BOOLEAN = BooleanCodec()
FLOAT = FloatCodec()
TIMESTAMP = TimestampCodec()
ADDRESS = AddressCodec()
