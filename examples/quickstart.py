#!/usr/bin/env python3
"""KATCP codec quickstart -- a device answering a sensor poll.

Demonstrates the core workflow of the codec:

1. Parse a chunk of incoming wire lines.
2. Decode each message into its family role.
3. Answer a ``?sensor-value`` request with informs and a count reply.
4. Answer an unknown request with an error reply.
5. Keep a typed client-side copy of a sensor in step with updates.

Run:
    python examples/quickstart.py
"""
from __future__ import annotations

from datetime import UTC, datetime

from katcp_codec import (
    FLOAT,
    KatcpError,
    Sensor,
    SensorReading,
    SensorValue,
    Status,
    VersionConnect,
    decode_message,
    format_error_reply,
    parse_many,
)


def main() -> None:
    # -- Step 1: Announce ourselves and parse what the client sent -----------
    print("[1] Connect informs:")
    for inform in (VersionConnect.protocol(), VersionConnect.library()):
        print("   ", inform.serialize(), end="")

    incoming = "?sensor-value[1] temp\r\n?frobnicate[2]\n"
    messages = parse_many(incoming)
    print(f"[2] Parsed {len(messages)} message(s)")

    # -- Step 2/3/4: Decode and reply ----------------------------------------
    temp = Sensor("temp", FLOAT, 21.5, status=Status.NOMINAL, timestamp=datetime.now(UTC))
    outgoing: list[str] = []
    for message in messages:
        try:
            body = decode_message(message)
        except KatcpError as exc:
            outgoing.append(format_error_reply(message, exc).serialize())
            continue
        if isinstance(body, SensorValue.Request):
            update = SensorValue.Inform(temp.timestamp, (temp.reading(),))
            outgoing.append(update.serialize(message.id))
            outgoing.append(SensorValue.Reply.ok(1).serialize(message.id))
    print("[3] Replies:")
    for line in outgoing:
        print("   ", line, end="")

    # -- Step 5: A client mirrors the sensor ---------------------------------
    mirror = Sensor("temp", FLOAT, 0.0)
    mirror.apply(SensorValue.Inform.from_line(outgoing[0]))
    print(f"[4] Client copy: {mirror!r}")

    reading = SensorReading("temp", Status.WARN, "35.25")
    mirror.update_from_reading(datetime.now(UTC), reading)
    print(f"    after update: {mirror!r} valid={mirror.status.is_valid}")


if __name__ == "__main__":
    main()
