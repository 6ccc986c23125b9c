"""Shared fixtures for KATCP conformance tests.

Provides canonical wire lines, typed message bodies and reusable
timestamps for the protocol-level scenario and round-trip tests.
"""
from __future__ import annotations

from datetime import timedelta
from ipaddress import IPv4Address, IPv6Address

import pytest

from katcp_codec.arguments.composites import ArgumentType, TypedValues
from katcp_codec.arguments.scalars import EPOCH, Address
from katcp_codec.messages import (
    ChangeAction,
    ChangeTarget,
    ClientConnected,
    ClientList,
    CustomVersion,
    DeviceVersion,
    Disconnect,
    Halt,
    Help,
    InterfaceChange,
    InterfaceChanged,
    Level,
    LibraryVersion,
    Log,
    LogLevel,
    MessageBody,
    ProtocolFlag,
    ProtocolVersion,
    Restart,
    SamplingStrategy,
    SensorList,
    SensorReading,
    SensorSampling,
    SensorStatus,
    SensorValue,
    Status,
    VersionConnect,
    VersionList,
    Watchdog,
)

# ---------------------------------------------------------------------------
# Common values used across tests
# ---------------------------------------------------------------------------
T0 = EPOCH + timedelta(seconds=1_700_000_000, microseconds=123_456)
T100 = EPOCH + timedelta(seconds=100)

SCENARIO_LINES = {
    "halt-request": "?halt\n",
    "halt-invalid": "!halt invalid You\\_messed\\_up\n",
    "log-warn": "#log warn 100 foo.bar.baz Hey\\_there\\_kiddo\n",
    "sensor-list-boolean": (
        "#sensor-list drive.enable-azim "
        "Azimuth\\_drive\\_enable\\_signal\\_status \\@ boolean\n"
    ),
}


def _sample_bodies() -> list[MessageBody]:
    return [
        Halt.Request(),
        Halt.Reply.ok(),
        Halt.Reply.invalid("You messed up"),
        Restart.Request(),
        Restart.Reply.fail("busy"),
        Watchdog.Request(),
        Watchdog.Reply.ok(),
        Help.Request(),
        Help.Request("sensor-list"),
        Help.Inform("halt", "Halt the device\nright now"),
        Help.Reply.ok(14),
        VersionList.Request(),
        VersionList.Inform("katcp-codec", "1.0", "build\\7"),
        VersionList.Reply.fail("nope"),
        Disconnect.Inform("bye"),
        VersionConnect.Inform(
            ProtocolVersion(
                5, 0, frozenset({ProtocolFlag.MULTI_CLIENT, ProtocolFlag.TIMEOUT_HINTS})
            )
        ),
        VersionConnect.Inform(LibraryVersion("katcp-codec-1.0", "python-3.12")),
        VersionConnect.Inform(DeviceVersion("2.1", "rc1")),
        VersionConnect.Inform(CustomVersion("fpga", "0.9", "tag v0.9")),
        InterfaceChanged.Inform(),
        InterfaceChanged.Inform(InterfaceChange(ChangeTarget.REQUEST_LIST)),
        InterfaceChanged.Inform(
            InterfaceChange(ChangeTarget.REQUEST, "capture-start", ChangeAction.REMOVED)
        ),
        Log.Inform(Level.INFO, T0, "device.main", "started up"),
        LogLevel.Request(),
        LogLevel.Request(Level.TRACE),
        LogLevel.Reply.ok(Level.OFF),
        ClientList.Request(),
        ClientList.Inform(Address(IPv4Address("192.168.1.5"), 40000)),
        ClientList.Inform(Address(IPv6Address("fe80::1"), 7147)),
        ClientList.Inform(Address(IPv6Address("::1"))),
        ClientList.Reply.ok(0),
        ClientConnected.Inform("client 192.168.1.5:40000 connected"),
        SensorList.Request("temp"),
        SensorList.Inform(
            "temp", "Ambient temperature", "degC",
            TypedValues(ArgumentType.FLOAT, (-40.0, 85.5)),
        ),
        SensorList.Inform(
            "when", "Last sync", "s", TypedValues(ArgumentType.TIMESTAMP, (T0,))
        ),
        SensorList.Reply.ok(1),
        SensorSampling.Request("temp", SamplingStrategy.differential_rate(0.5, 1.0, 60.0)),
        SensorSampling.Request("temp,mode"),
        SensorSampling.Reply.ok("temp", SamplingStrategy.period(2.5)),
        SensorSampling.Reply.invalid("unknown strategy"),
        SensorValue.Request(),
        SensorValue.Inform(T0, (SensorReading("temp", Status.NOMINAL, "21.5"),)),
        SensorValue.Reply.ok(1),
        SensorStatus.Inform(
            T100,
            (
                SensorReading("mode", Status.WARN, "manual override"),
                SensorReading("temp", Status.UNREACHABLE, ""),
            ),
        ),
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def scenario_lines() -> dict[str, str]:
    return dict(SCENARIO_LINES)


@pytest.fixture(params=_sample_bodies(), ids=lambda body: type(body).__qualname__)
def sample_body(request: pytest.FixtureRequest) -> MessageBody:
    """One representative body per role shape, including edge values."""
    return request.param
