"""Packet serializer and frame builder/parser for the serial link.

Frame layout (format version 1)::

    +--------+---------+--------+-------------------+---------+
    |  SOF   | Command | Length |      Payload      |  CRC-8  |
    | 1 byte | 1 byte  | 1 byte | 0-255 bytes       | 1 byte  |
    +--------+---------+--------+-------------------+---------+

- SOF: start-of-frame marker, always 0x45
- Command: CommandID ordinal
- Length: number of payload bytes that follow
- CRC-8: checksum over (command + length + payload)

Command + Length + Payload is the serialized packet; a frame is always
exactly two bytes longer than it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import SerializationError
from ..utils.crc import crc8

FRAME_VERSION = 1
START_OF_FRAME = 0x45
MAX_PAYLOAD = 0xFF
FRAME_OVERHEAD = 2  # SOF + CRC
HEADER_SIZE = 3  # SOF + command + length


@dataclass
class Packet:
    """A command and its serialized payload."""

    command_id: int
    payload: bytes = b""

    def __repr__(self) -> str:
        return (
            f"Packet(command_id=0x{int(self.command_id):02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def serialize_packet(packet: Packet) -> bytes:
    """Serialize a packet to ``[command, length, *payload]``.

    Raises:
        SerializationError: If the command is not a byte, the payload is
            not a byte sequence, or the payload exceeds 255 bytes.
    """
    command = packet.command_id
    if isinstance(command, bool) or not isinstance(command, int) or not 0 <= command <= 0xFF:
        raise SerializationError(f"Command id must be 0-255, got {command!r}")
    try:
        payload = bytes(packet.payload)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Payload is not a byte sequence: {e}") from e
    if len(payload) > MAX_PAYLOAD:
        raise SerializationError(
            f"Payload must be at most {MAX_PAYLOAD} bytes, got {len(payload)}"
        )
    return bytes([command, len(payload)]) + payload


def build_frame(packet: Packet) -> bytes:
    """Build a frame ready to write to the transport.

    Args:
        packet: Command id and payload.

    Returns:
        ``SOF + serialized packet + CRC-8``.
    """
    body = serialize_packet(packet)
    return bytes([START_OF_FRAME]) + body + bytes([crc8(body)])


def parse_frame(data: bytes) -> Packet | None:
    """Parse one complete frame.

    Returns:
        A ``Packet`` if ``data`` is exactly one well-formed frame, or
        ``None`` if the marker, length or checksum is wrong.
    """
    if len(data) < HEADER_SIZE + 1:
        return None

    if data[0] != START_OF_FRAME:
        return None

    length = data[2]
    if len(data) != HEADER_SIZE + length + 1:
        return None

    body = bytes(data[1 : HEADER_SIZE + length])
    if crc8(body) != data[-1]:
        return None

    return Packet(command_id=data[1], payload=body[2:])
