"""KATCP message families.

Importing this package registers every standard family, so
:func:`decode_message` can dispatch any of them by name.

* **Machinery** -- :class:`MessageFamily`, :class:`MessageBody` and the
  shared role shapes (:mod:`~katcp_codec.messages.base`).
* **Core** -- lifecycle, help, version and interface-change families
  (:mod:`~katcp_codec.messages.core`).
* **Log** -- ``log`` and ``log-level`` (:mod:`~katcp_codec.messages.log`).
* **Multi-client** -- ``client-list`` and ``client-connected``
  (:mod:`~katcp_codec.messages.multi_client`).
* **Sensors** -- discovery, sampling and value updates
  (:mod:`~katcp_codec.messages.sensors`).
"""
from __future__ import annotations

from katcp_codec.messages.base import (
    CodedReply,
    CountReply,
    EmptyBody,
    GenericReply,
    MessageBody,
    MessageFamily,
    OptionalNameRequest,
    TextInform,
    decode_message,
    message_family,
    registered_families,
)
from katcp_codec.messages.core import (
    ChangeAction,
    ChangeTarget,
    Component,
    CustomVersion,
    DeviceVersion,
    Disconnect,
    Halt,
    Help,
    InterfaceChange,
    InterfaceChanged,
    LibraryVersion,
    ProtocolFlag,
    ProtocolVersion,
    Restart,
    VersionConnect,
    VersionList,
    Watchdog,
)
from katcp_codec.messages.log import Level, Log, LogLevel
from katcp_codec.messages.multi_client import ClientConnected, ClientList
from katcp_codec.messages.sensors import (
    SamplingStrategy,
    Sensor,
    SensorList,
    SensorReading,
    SensorSampling,
    SensorStatus,
    SensorUpdate,
    SensorValue,
    Status,
    StrategyVerb,
)

__all__ = [
    # Machinery
    "MessageBody",
    "MessageFamily",
    "EmptyBody",
    "OptionalNameRequest",
    "TextInform",
    "CodedReply",
    "GenericReply",
    "CountReply",
    "decode_message",
    "message_family",
    "registered_families",
    # Core
    "Halt",
    "Restart",
    "Watchdog",
    "Disconnect",
    "Help",
    "VersionList",
    "VersionConnect",
    "ProtocolFlag",
    "ProtocolVersion",
    "LibraryVersion",
    "DeviceVersion",
    "CustomVersion",
    "Component",
    "InterfaceChanged",
    "InterfaceChange",
    "ChangeTarget",
    "ChangeAction",
    # Log
    "Level",
    "Log",
    "LogLevel",
    # Multi-client
    "ClientList",
    "ClientConnected",
    # Sensors
    "Status",
    "SensorList",
    "SensorSampling",
    "SamplingStrategy",
    "StrategyVerb",
    "SensorReading",
    "SensorUpdate",
    "SensorValue",
    "SensorStatus",
    "Sensor",
]
