"""Tests for the KATCP sensor families and the client-side Sensor record.

Covers:

1. **Status** -- labels and validity.
2. **sensor-list** -- declarations with type-tagged parameters.
3. **Sampling** -- strategy arity, sensor-sampling requests and replies.
4. **Readings** -- sensor-value and sensor-status updates.
5. **Sensor** -- typed updates from readings.
"""
from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from katcp_codec.arguments.composites import ArgumentType, TypedValues
from katcp_codec.arguments.scalars import BOOLEAN, EPOCH, FLOAT, INT32, STRING
from katcp_codec.core.errors import BadArgument, KatcpError, MissingArgument
from katcp_codec.core.types import RetCode
from katcp_codec.messages.sensors import (
    SamplingStrategy,
    Sensor,
    SensorList,
    SensorReading,
    SensorSampling,
    SensorStatus,
    SensorValue,
    Status,
    StrategyVerb,
)

T100 = EPOCH + timedelta(seconds=100)

# =========================================================================
# Status
# =========================================================================


class TestStatus:
    """Tests for the Status enum."""

    @pytest.mark.parametrize("status", [Status.NOMINAL, Status.WARN, Status.ERROR])
    def test_valid(self, status: Status) -> None:
        assert status.is_valid

    @pytest.mark.parametrize(
        "status",
        [Status.UNKNOWN, Status.FAILURE, Status.UNREACHABLE, Status.INACTIVE],
    )
    def test_invalid(self, status: Status) -> None:
        assert not status.is_valid


# =========================================================================
# sensor-list
# =========================================================================


class TestSensorList:
    """Tests for the sensor-list family."""

    def test_boolean_sensor_with_empty_units(self) -> None:
        line = (
            "#sensor-list drive.enable-azim "
            "Azimuth\\_drive\\_enable\\_signal\\_status \\@ boolean\n"
        )
        inform = SensorList.Inform.from_line(line)
        assert inform == SensorList.Inform(
            "drive.enable-azim",
            "Azimuth drive enable signal status",
            "",
            TypedValues(ArgumentType.BOOLEAN),
        )
        assert inform.serialize() == line

    def test_integer_sensor_with_range(self) -> None:
        inform = SensorList.Inform.from_line("#sensor-list temp Temperature degC integer -10 50\n")
        assert inform.params == TypedValues(ArgumentType.INTEGER, (-10, 50))

    def test_discrete_sensor(self) -> None:
        inform = SensorList.Inform.from_line("#sensor-list mode Mode \\@ discrete on off\n")
        assert inform.params.values == ("on", "off")

    def test_missing_type(self) -> None:
        with pytest.raises(MissingArgument):
            SensorList.Inform.from_line("#sensor-list temp Temperature degC\n")

    def test_request_filter(self) -> None:
        assert SensorList.Request("temp").serialize() == "?sensor-list temp\n"
        assert SensorList.Request.from_line("?sensor-list\n").name is None

    def test_reply(self) -> None:
        assert SensorList.Reply.from_line("!sensor-list ok 7\n").count == 7


# =========================================================================
# Sampling
# =========================================================================


class TestSamplingStrategy:
    """Tests for SamplingStrategy."""

    @pytest.mark.parametrize(
        ("strategy", "arguments"),
        [
            (SamplingStrategy.auto(), ["auto"]),
            (SamplingStrategy.none(), ["none"]),
            (SamplingStrategy.period(0.5), ["period", "0.5"]),
            (SamplingStrategy.event(), ["event"]),
            (SamplingStrategy.differential(2.0), ["differential", "2.0"]),
            (SamplingStrategy.event_rate(1.0, 10.0), ["event-rate", "1.0", "10.0"]),
            (
                SamplingStrategy.differential_rate(0.1, 1.0, 10.0),
                ["differential-rate", "0.1", "1.0", "10.0"],
            ),
        ],
    )
    def test_encode(self, strategy: SamplingStrategy, arguments: list[str]) -> None:
        assert strategy.to_arguments() == arguments

    def test_arity_checked(self) -> None:
        with pytest.raises(ValueError, match="takes 1 parameter"):
            SamplingStrategy(StrategyVerb.PERIOD)
        with pytest.raises(ValueError):
            SamplingStrategy(StrategyVerb.AUTO, (1.0,))


class TestSensorSampling:
    """Tests for the sensor-sampling family."""

    def test_set_request(self) -> None:
        request = SensorSampling.Request("a,b", SamplingStrategy.event_rate(1.0, 10.0))
        assert request.serialize() == "?sensor-sampling a,b event-rate 1.0 10.0\n"
        assert SensorSampling.Request.from_line(request.serialize()) == request
        assert request.sensor_names == ["a", "b"]

    def test_query_request(self) -> None:
        request = SensorSampling.Request.from_line("?sensor-sampling a\n")
        assert request.strategy is None
        assert request.serialize() == "?sensor-sampling a\n"

    def test_request_missing_parameter(self) -> None:
        with pytest.raises(MissingArgument):
            SensorSampling.Request.from_line("?sensor-sampling a period\n")

    def test_request_surplus_parameter(self) -> None:
        with pytest.raises(BadArgument):
            SensorSampling.Request.from_line("?sensor-sampling a auto 1\n")

    def test_request_unknown_verb(self) -> None:
        with pytest.raises(BadArgument):
            SensorSampling.Request.from_line("?sensor-sampling a sometimes\n")

    def test_request_integer_parameter(self) -> None:
        """Integer-looking parameters decode as floats."""
        request = SensorSampling.Request.from_line("?sensor-sampling a period 2\n")
        assert request.strategy == SamplingStrategy.period(2.0)

    def test_reply_ok(self) -> None:
        reply = SensorSampling.Reply.from_line("!sensor-sampling ok a,b differential 0.5\n")
        assert reply == SensorSampling.Reply.ok("a,b", SamplingStrategy.differential(0.5))
        assert reply.serialize() == "!sensor-sampling ok a,b differential 0.5\n"

    def test_reply_ok_without_strategy(self) -> None:
        with pytest.raises(MissingArgument):
            SensorSampling.Reply.from_line("!sensor-sampling ok a\n")

    def test_reply_fail(self) -> None:
        reply = SensorSampling.Reply.from_line("!sensor-sampling fail unknown\\_sensor\n")
        assert reply.code is RetCode.FAIL
        assert reply.names is None
        assert reply.strategy is None
        assert reply.message == "unknown sensor"


# =========================================================================
# Readings
# =========================================================================


class TestSensorValue:
    """Tests for sensor-value and sensor-status."""

    LINE = "#sensor-value 1000.25 2 a nominal 1 b warn 8.73\n"

    def test_decode(self) -> None:
        inform = SensorValue.Inform.from_line(self.LINE)
        assert inform.timestamp == EPOCH + timedelta(seconds=1000, microseconds=250_000)
        assert inform.readings == (
            SensorReading("a", Status.NOMINAL, "1"),
            SensorReading("b", Status.WARN, "8.73"),
        )
        assert inform.serialize() == self.LINE

    def test_zero_readings(self) -> None:
        inform = SensorValue.Inform.from_line("#sensor-value 100 0\n")
        assert inform.readings == ()

    def test_short_readings(self) -> None:
        with pytest.raises(MissingArgument):
            SensorValue.Inform.from_line("#sensor-value 100 2 a nominal 1\n")

    def test_bad_status(self) -> None:
        with pytest.raises(BadArgument):
            SensorValue.Inform.from_line("#sensor-value 100 1 a shiny 1\n")

    def test_surplus_readings(self) -> None:
        with pytest.raises(BadArgument):
            SensorValue.Inform.from_line("#sensor-value 100 1 a nominal 1 b\n")

    def test_escaped_value_is_unescaped(self) -> None:
        inform = SensorValue.Inform.from_line("#sensor-value 100 1 msg nominal hi\\_there\n")
        assert inform.readings[0].value == "hi there"

    def test_sensor_status_shares_shape(self) -> None:
        line = self.LINE.replace("#sensor-value", "#sensor-status")
        status = SensorStatus.Inform.from_line(line)
        value = SensorValue.Inform.from_line(self.LINE)
        assert status.readings == value.readings
        assert status != value

    def test_request_and_reply(self) -> None:
        assert SensorValue.Request("a").serialize() == "?sensor-value a\n"
        assert SensorValue.Request().serialize() == "?sensor-value\n"
        assert SensorValue.Reply.ok(2).serialize() == "!sensor-value ok 2\n"


class TestSensorReading:
    """Tests for SensorReading helpers."""

    def test_from_value(self) -> None:
        reading = SensorReading.from_value("a", Status.NOMINAL, True, BOOLEAN)
        assert reading.value == "1"
        assert reading.decode(BOOLEAN) is True

    def test_string_values_keep_spaces(self) -> None:
        reading = SensorReading.from_value("m", Status.NOMINAL, "a b", STRING)
        assert reading.value == "a b"
        assert reading.decode(STRING) == "a b"

    def test_empty_string_value(self) -> None:
        reading = SensorReading.from_value("m", Status.NOMINAL, "", STRING)
        assert reading.to_arguments() == ["m", "nominal", "\\@"]
        assert reading.decode(STRING) == ""


# =========================================================================
# Sensor record
# =========================================================================


class TestSensor:
    """Tests for the client-side Sensor record."""

    def test_initial_state(self) -> None:
        sensor = Sensor("temp", INT32, 0)
        assert sensor.status is Status.UNKNOWN
        assert sensor.timestamp is None

    def test_update_from_reading(self, caplog: pytest.LogCaptureFixture) -> None:
        sensor = Sensor("b", FLOAT, 0.0)
        with caplog.at_level(logging.DEBUG, logger="katcp_codec.messages.sensors"):
            sensor.update_from_reading(T100, SensorReading("b", Status.WARN, "8.73"))
        assert sensor.value == 8.73
        assert sensor.status is Status.WARN
        assert sensor.timestamp == T100
        assert "Sensor b updated" in caplog.text

    def test_name_mismatch(self) -> None:
        sensor = Sensor("a", FLOAT, 0.0)
        with pytest.raises(KatcpError, match="applied to sensor 'a'"):
            sensor.update_from_reading(T100, SensorReading("b", Status.NOMINAL, "1.0"))

    def test_bad_value_leaves_sensor_unchanged(self) -> None:
        sensor = Sensor("a", INT32, 5)
        with pytest.raises(BadArgument):
            sensor.update_from_reading(T100, SensorReading("a", Status.NOMINAL, "x"))
        assert sensor.value == 5
        assert sensor.status is Status.UNKNOWN

    def test_apply_update(self) -> None:
        update = SensorStatus.Inform.from_line("#sensor-status 100 2 a nominal 1 b warn 2\n")
        sensor = Sensor("b", INT32, 0)
        assert sensor.apply(update)
        assert sensor.value == 2
        assert not Sensor("c", INT32, 0).apply(update)

    def test_reading(self) -> None:
        sensor = Sensor("flag", BOOLEAN, True, status=Status.NOMINAL)
        assert sensor.reading() == SensorReading("flag", Status.NOMINAL, "1")

    def test_from_readings(self) -> None:
        update = SensorValue.Inform.from_line("#sensor-value 100 1 a error 3\n")
        sensor = Sensor.from_readings("a", INT32, update.timestamp, update.readings)
        assert sensor.value == 3
        assert sensor.status is Status.ERROR
        assert sensor.timestamp == T100

    def test_from_readings_missing(self) -> None:
        with pytest.raises(KatcpError, match="No reading"):
            Sensor.from_readings("z", INT32, T100, [])

    def test_repr(self) -> None:
        assert repr(Sensor("a", INT32, 1)) == "Sensor(name='a', status='unknown', value=1)"
