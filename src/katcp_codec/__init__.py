"""KATCP message codec.

Parses, validates, serialises and decodes messages of the Karoo Array
Telescope Control Protocol: a line-oriented text protocol of requests,
replies and informs exchanged between clients and devices.

Layers
------
1. Core types, errors and config (``katcp_codec.core``)
2. Wire format: escaping, grammar, message model, parser
   (:mod:`katcp_codec.wire`)
3. Argument codecs and composite conventions (:mod:`katcp_codec.arguments`)
4. Message families (:mod:`katcp_codec.messages`)
"""
from __future__ import annotations

__version__ = "1.0.0a1"

# ---------------------------------------------------------------------------
# Level 3 -- Argument codecs
# ---------------------------------------------------------------------------
from katcp_codec.arguments import (
    ADDRESS,
    BOOLEAN,
    FLOAT,
    INT32,
    STRING,
    TIMESTAMP,
    UINT32,
    Address,
    ArgumentCodec,
    ArgumentStream,
    ArgumentType,
    CodedResult,
    DiscreteCodec,
    OptionalCodec,
    TypedValues,
)

# ---------------------------------------------------------------------------
# Level 1 -- Core types, errors, config
# ---------------------------------------------------------------------------
from katcp_codec.core.config import KatcpCodecConfig
from katcp_codec.core.errors import (
    BadArgument,
    FormatError,
    IncorrectType,
    KatcpError,
    MissingArgument,
    ParseError,
)
from katcp_codec.core.types import MessageKind, RetCode

# ---------------------------------------------------------------------------
# Level 4 -- Message families
# ---------------------------------------------------------------------------
from katcp_codec.messages import (
    ClientConnected,
    ClientList,
    Disconnect,
    Halt,
    Help,
    InterfaceChanged,
    Level,
    Log,
    LogLevel,
    MessageBody,
    MessageFamily,
    Restart,
    SamplingStrategy,
    Sensor,
    SensorList,
    SensorReading,
    SensorSampling,
    SensorStatus,
    SensorValue,
    Status,
    VersionConnect,
    VersionList,
    Watchdog,
    decode_message,
    message_family,
)

# ---------------------------------------------------------------------------
# Level 2 -- Wire format
# ---------------------------------------------------------------------------
from katcp_codec.wire import (
    Message,
    escape,
    format_error_reply,
    parse,
    parse_many,
    parse_partial,
    unescape,
)

__all__ = [
    "__version__",
    # Core
    "KatcpCodecConfig",
    "KatcpError",
    "FormatError",
    "ParseError",
    "IncorrectType",
    "MissingArgument",
    "BadArgument",
    "MessageKind",
    "RetCode",
    # Wire
    "Message",
    "escape",
    "unescape",
    "parse",
    "parse_partial",
    "parse_many",
    "format_error_reply",
    # Arguments
    "ArgumentCodec",
    "ArgumentStream",
    "ArgumentType",
    "CodedResult",
    "DiscreteCodec",
    "OptionalCodec",
    "TypedValues",
    "Address",
    "STRING",
    "INT32",
    "UINT32",
    "BOOLEAN",
    "FLOAT",
    "TIMESTAMP",
    "ADDRESS",
    # Messages
    "MessageBody",
    "MessageFamily",
    "decode_message",
    "message_family",
    "Halt",
    "Restart",
    "Watchdog",
    "Disconnect",
    "Help",
    "VersionList",
    "VersionConnect",
    "InterfaceChanged",
    "Log",
    "LogLevel",
    "Level",
    "ClientList",
    "ClientConnected",
    "SensorList",
    "SensorSampling",
    "SensorValue",
    "SensorStatus",
    "SensorReading",
    "SamplingStrategy",
    "Status",
    "Sensor",
]
