"""KATCP argument codec -- scalar codecs, the argument cursor and composites.

* **Scalars** -- one codec per KATCP type
  (:mod:`~katcp_codec.arguments.scalars`).
* **ArgumentStream** -- left-to-right decoding cursor
  (:mod:`~katcp_codec.arguments.stream`).
* **Composites** -- coded result, count-prefixed repetition, type-tagged
  lists, literal multiplexing and keyed verbs
  (:mod:`~katcp_codec.arguments.composites`).
"""
from __future__ import annotations

from katcp_codec.arguments.composites import (
    ARGUMENT_TYPE,
    RET_CODE,
    ArgumentType,
    CodedResult,
    TypedValues,
    decode_coded_result,
    decode_counted,
    decode_keyed_verb,
    decode_multiplexed,
    encode_coded_result,
    encode_counted,
)
from katcp_codec.arguments.scalars import (
    ADDRESS,
    BOOLEAN,
    FLOAT,
    INT32,
    STRING,
    TIMESTAMP,
    UINT32,
    Address,
    AddressCodec,
    ArgumentCodec,
    BooleanCodec,
    DiscreteCodec,
    FloatCodec,
    IntegerCodec,
    OptionalCodec,
    StringCodec,
    TimestampCodec,
)
from katcp_codec.arguments.stream import ArgumentStream

__all__ = [
    # Scalars
    "ArgumentCodec",
    "StringCodec",
    "IntegerCodec",
    "BooleanCodec",
    "FloatCodec",
    "TimestampCodec",
    "AddressCodec",
    "DiscreteCodec",
    "OptionalCodec",
    "Address",
    "STRING",
    "INT32",
    "UINT32",
    "BOOLEAN",
    "FLOAT",
    "TIMESTAMP",
    "ADDRESS",
    # Stream
    "ArgumentStream",
    # Composites
    "RET_CODE",
    "ARGUMENT_TYPE",
    "ArgumentType",
    "CodedResult",
    "TypedValues",
    "decode_coded_result",
    "encode_coded_result",
    "decode_counted",
    "encode_counted",
    "decode_multiplexed",
    "decode_keyed_verb",
]
