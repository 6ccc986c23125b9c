"""Sensor families: discovery, sampling strategies and value updates.

Sensor values travel as raw strings inside a :class:`SensorReading`
because their type is only known from the sensor's ``#sensor-list``
declaration.  :class:`Sensor` keeps a typed client-side copy and decodes
readings with the codec that declaration implies.
"""
from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Self, TypeVar

from katcp_codec.arguments.composites import (
    TypedValues,
    decode_coded_result,
    decode_counted,
    decode_keyed_verb,
    encode_coded_result,
    encode_counted,
)
from katcp_codec.arguments.scalars import FLOAT, STRING, TIMESTAMP, ArgumentCodec, DiscreteCodec
from katcp_codec.arguments.stream import ArgumentStream
from katcp_codec.core.errors import KatcpError
from katcp_codec.core.types import RetCode
from katcp_codec.messages.base import (
    CodedReply,
    CountReply,
    MessageBody,
    MessageFamily,
    OptionalNameRequest,
)
from katcp_codec.wire.escaping import escape

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

class Status(enum.StrEnum):
    """Quality of a sensor reading."""

    UNKNOWN = "unknown"
    NOMINAL = "nominal"
    WARN = "warn"
    ERROR = "error"
    FAILURE = "failure"
    UNREACHABLE = "unreachable"
    INACTIVE = "inactive"

    @property
    def is_valid(self) -> bool:
        """Whether the reading's value can be trusted."""
        return self in (Status.NOMINAL, Status.WARN, Status.ERROR)


STATUS: DiscreteCodec[Status] = DiscreteCodec(Status)


# ---------------------------------------------------------------------------
# sensor-list
# ---------------------------------------------------------------------------

class SensorList(MessageFamily, name="sensor-list"):
    """Describe all sensors, or the one named in the request."""

    @dataclass(frozen=True, slots=True)
    class Request(OptionalNameRequest):
        pass

    @dataclass(frozen=True, slots=True)
    class Inform(MessageBody):
        """One sensor declaration.

        ``params`` carries the sensor type followed by its type-specific
        parameters (range bounds, discrete options).
        """

        name: str
        description: str
        units: str
        params: TypedValues

        def to_arguments(self) -> list[str]:
            return [
                STRING.encode(self.name),
                STRING.encode(self.description),
                STRING.encode(self.units),
                *self.params.to_arguments(),
            ]

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            return cls(
                stream.take(STRING, "name"),
                stream.take(STRING, "description"),
                stream.take(STRING, "units"),
                TypedValues.from_arguments(stream),
            )

    @dataclass(frozen=True, slots=True)
    class Reply(CountReply):
        pass


# ---------------------------------------------------------------------------
# Sampling strategies
# ---------------------------------------------------------------------------

class StrategyVerb(enum.StrEnum):
    AUTO = "auto"
    NONE = "none"
    PERIOD = "period"
    EVENT = "event"
    DIFFERENTIAL = "differential"
    EVENT_RATE = "event-rate"
    DIFFERENTIAL_RATE = "differential-rate"


STRATEGY_VERB: DiscreteCodec[StrategyVerb] = DiscreteCodec(StrategyVerb)

STRATEGY_ARITY: dict[StrategyVerb, int] = {
    StrategyVerb.AUTO: 0,
    StrategyVerb.NONE: 0,
    StrategyVerb.PERIOD: 1,
    StrategyVerb.EVENT: 0,
    StrategyVerb.DIFFERENTIAL: 1,
    StrategyVerb.EVENT_RATE: 2,
    StrategyVerb.DIFFERENTIAL_RATE: 3,
}


@dataclass(frozen=True, slots=True)
class SamplingStrategy:
    """How a device reports a sensor.

    Parameters are seconds for periods and rates and sensor units for the
    differential threshold:

    * ``period`` -- (period,)
    * ``differential`` -- (threshold,)
    * ``event-rate`` -- (shortest, longest)
    * ``differential-rate`` -- (threshold, shortest, longest)
    """

    verb: StrategyVerb
    params: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))
        expected = STRATEGY_ARITY[self.verb]
        if len(self.params) != expected:
            raise ValueError(
                f"{self.verb.value!r} takes {expected} parameter(s), "
                f"got {len(self.params)}"
            )

    @classmethod
    def auto(cls) -> SamplingStrategy:
        return cls(StrategyVerb.AUTO)

    @classmethod
    def none(cls) -> SamplingStrategy:
        return cls(StrategyVerb.NONE)

    @classmethod
    def period(cls, period: float) -> SamplingStrategy:
        return cls(StrategyVerb.PERIOD, (period,))

    @classmethod
    def event(cls) -> SamplingStrategy:
        return cls(StrategyVerb.EVENT)

    @classmethod
    def differential(cls, threshold: float) -> SamplingStrategy:
        return cls(StrategyVerb.DIFFERENTIAL, (threshold,))

    @classmethod
    def event_rate(cls, shortest: float, longest: float) -> SamplingStrategy:
        return cls(StrategyVerb.EVENT_RATE, (shortest, longest))

    @classmethod
    def differential_rate(
        cls, threshold: float, shortest: float, longest: float
    ) -> SamplingStrategy:
        return cls(StrategyVerb.DIFFERENTIAL_RATE, (threshold, shortest, longest))

    def to_arguments(self) -> list[str]:
        return [self.verb.value, *(FLOAT.encode(p) for p in self.params)]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> SamplingStrategy | None:
        """Decode an optional strategy; ``None`` if the stream is empty."""
        decoded = decode_keyed_verb(stream, STRATEGY_VERB, STRATEGY_ARITY, FLOAT)
        if decoded is None:
            return None
        verb, params = decoded
        return cls(verb, tuple(params))


class SensorSampling(MessageFamily, name="sensor-sampling"):
    """Query (no strategy) or set the sampling strategy of sensors.

    ``names`` is a comma-separated list of sensor names.
    """

    @dataclass(frozen=True, slots=True)
    class Request(MessageBody):
        names: str
        strategy: SamplingStrategy | None = None

        @property
        def sensor_names(self) -> list[str]:
            return self.names.split(",")

        def to_arguments(self) -> list[str]:
            tokens = [STRING.encode(self.names)]
            if self.strategy is not None:
                tokens.extend(self.strategy.to_arguments())
            return tokens

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            names = stream.take(STRING, "sensor names")
            return cls(names, SamplingStrategy.from_arguments(stream))

    @dataclass(frozen=True, slots=True)
    class Reply(CodedReply):
        code: RetCode = RetCode.OK
        names: str | None = None
        strategy: SamplingStrategy | None = None
        message: str | None = None

        def __post_init__(self) -> None:
            self._check_coded(self.names, self.strategy)

        @classmethod
        def ok(cls, names: str, strategy: SamplingStrategy) -> Self:
            return cls(RetCode.OK, names, strategy)

        def to_arguments(self) -> list[str]:
            payload: list[str] = []
            if self.names is not None and self.strategy is not None:
                payload = [STRING.encode(self.names), *self.strategy.to_arguments()]
            return encode_coded_result(self.code, payload, self.message)

        @classmethod
        def from_arguments(cls, stream: ArgumentStream) -> Self:
            result = decode_coded_result(stream, _decode_sampling_payload)
            names, strategy = result.payload or (None, None)
            return cls(result.code, names, strategy, result.message)


def _decode_sampling_payload(
    stream: ArgumentStream,
) -> tuple[str, SamplingStrategy | None]:
    names = stream.take(STRING, "sensor names")
    strategy = SamplingStrategy.from_arguments(stream)
    if strategy is None:
        # an ok reply always echoes the strategy in effect
        stream.take_raw("strategy")
    return names, strategy


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SensorReading:
    """One ``name status value`` triple.

    ``value`` is the unescaped text of the value token.  Decode it with
    the sensor's codec via :meth:`decode` or :class:`Sensor`.
    """

    name: str
    status: Status
    value: str

    def decode(self, codec: ArgumentCodec[T]) -> T:
        return codec.decode(escape(self.value))

    @classmethod
    def from_value(
        cls, name: str, status: Status, value: T, codec: ArgumentCodec[T]
    ) -> SensorReading:
        """Build a reading by encoding a typed *value* with *codec*."""
        return cls(name, status, STRING.decode(codec.encode(value)))

    def to_arguments(self) -> list[str]:
        return [STRING.encode(self.name), STATUS.encode(self.status), STRING.encode(self.value)]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> SensorReading:
        return cls(
            stream.take(STRING, "sensor name"),
            stream.take(STATUS, "sensor status"),
            stream.take(STRING, "sensor value"),
        )


@dataclass(frozen=True, slots=True)
class SensorUpdate(MessageBody):
    """A timestamp followed by count-prefixed readings."""

    timestamp: datetime
    readings: tuple[SensorReading, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "readings", tuple(self.readings))

    def to_arguments(self) -> list[str]:
        return [
            TIMESTAMP.encode(self.timestamp),
            *encode_counted(self.readings, SensorReading.to_arguments),
        ]

    @classmethod
    def from_arguments(cls, stream: ArgumentStream) -> Self:
        timestamp = stream.take(TIMESTAMP, "timestamp")
        return cls(timestamp, tuple(decode_counted(stream, SensorReading.from_arguments)))


class SensorValue(MessageFamily, name="sensor-value"):
    """Poll the current value of all sensors, or of the one named."""

    @dataclass(frozen=True, slots=True)
    class Request(OptionalNameRequest):
        pass

    @dataclass(frozen=True, slots=True)
    class Inform(SensorUpdate):
        pass

    @dataclass(frozen=True, slots=True)
    class Reply(CountReply):
        pass


class SensorStatus(MessageFamily, name="sensor-status"):
    """Asynchronous sensor update driven by the sampling strategy."""

    @dataclass(frozen=True, slots=True)
    class Inform(SensorUpdate):
        pass


# ---------------------------------------------------------------------------
# Client-side sensor record
# ---------------------------------------------------------------------------

class Sensor(Generic[T]):
    """A typed, mutable copy of a remote sensor.

    Parameters
    ----------
    name:
        Sensor name as declared by ``#sensor-list``.
    codec:
        Codec for the sensor's value type.
    value:
        Initial value.
    """

    def __init__(
        self,
        name: str,
        codec: ArgumentCodec[T],
        value: T,
        *,
        status: Status = Status.UNKNOWN,
        timestamp: datetime | None = None,
    ) -> None:
        self.name = name
        self.codec = codec
        self.value = value
        self.status = status
        self.timestamp = timestamp

    def __repr__(self) -> str:
        return (
            f"Sensor(name={self.name!r}, status={self.status.value!r}, "
            f"value={self.value!r})"
        )

    def update(self, status: Status, timestamp: datetime, value: T) -> None:
        self.status = status
        self.timestamp = timestamp
        self.value = value
        logger.debug("Sensor %s updated: %s %r", self.name, status.value, value)

    def update_from_reading(self, timestamp: datetime, reading: SensorReading) -> None:
        """Apply *reading*, decoding its value with this sensor's codec.

        Raises
        ------
        KatcpError
            If the reading names a different sensor.
        BadArgument
            If the value does not decode; the sensor is left unchanged.
        """
        if reading.name != self.name:
            raise KatcpError(
                f"Reading for {reading.name!r} applied to sensor {self.name!r}",
                details={"sensor": self.name, "reading": reading.name},
            )
        self.update(reading.status, timestamp, reading.decode(self.codec))

    def apply(self, update: SensorUpdate) -> bool:
        """Apply the first reading in *update* naming this sensor.

        Returns whether a matching reading was found.
        """
        for reading in update.readings:
            if reading.name == self.name:
                self.update_from_reading(update.timestamp, reading)
                return True
        return False

    def reading(self) -> SensorReading:
        """The current state as a :class:`SensorReading`."""
        return SensorReading.from_value(self.name, self.status, self.value, self.codec)

    @classmethod
    def from_readings(
        cls,
        name: str,
        codec: ArgumentCodec[T],
        timestamp: datetime,
        readings: Iterable[SensorReading],
    ) -> Sensor[T]:
        """Build a sensor from the first reading naming it.

        Raises
        ------
        KatcpError
            If no reading names the sensor.
        """
        for reading in readings:
            if reading.name == name:
                return cls(
                    name,
                    codec,
                    reading.decode(codec),
                    status=reading.status,
                    timestamp=timestamp,
                )
        raise KatcpError(f"No reading for sensor {name!r}", details={"sensor": name})


