"""Command identifiers, payload frames, and packet builders.

Each command is a single-byte id followed by a command-specific payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from ..errors import SerializationError
from .framing import Packet, build_frame


class CommandID(IntEnum):
    """Command identifiers (ordinal encoding)."""

    PING = 0
    WRITE_REGISTER = 1
    READ_REGISTER = 2
    PERFORM_ACTION = 3


class Action(IntEnum):
    """CC2500 command strobes carried by PERFORM_ACTION."""

    SRES = 0x30
    SFSTXON = 0x31
    SXOFF = 0x32
    SCAL = 0x33
    SRX = 0x34
    STX = 0x35
    SIDLE = 0x36
    SWOR = 0x38
    SPWD = 0x39
    SFRX = 0x3A
    SFTX = 0x3B
    SWORRST = 0x3C
    SNOP = 0x3D


def _check_byte(field: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise SerializationError(f"{field} must be 0-255, got {value!r}")
    return value


@dataclass(frozen=True)
class WriteRegisterFrame:
    """WRITE_REGISTER payload: ``[address, value]``.

    ``address`` is the chip's register address (e.g. FREQ2 = 0x0D).
    """

    SIZE: ClassVar[int] = 2

    address: int
    value: int

    def to_bytes(self) -> bytes:
        return bytes([
            _check_byte("Register address", self.address),
            _check_byte("Register value", self.value),
        ])

    @classmethod
    def from_bytes(cls, data: bytes) -> WriteRegisterFrame:
        if len(data) != cls.SIZE:
            raise SerializationError(
                f"WriteRegister payload must be {cls.SIZE} bytes, got {len(data)}"
            )
        return cls(address=data[0], value=data[1])


@dataclass(frozen=True)
class ReadRegisterFrame:
    """READ_REGISTER payload: ``[address]``."""

    SIZE: ClassVar[int] = 1

    address: int

    def to_bytes(self) -> bytes:
        return bytes([_check_byte("Register address", self.address)])

    @classmethod
    def from_bytes(cls, data: bytes) -> ReadRegisterFrame:
        if len(data) != cls.SIZE:
            raise SerializationError(
                f"ReadRegister payload must be {cls.SIZE} byte, got {len(data)}"
            )
        return cls(address=data[0])


def build_packet(command: CommandID, payload: bytes = b"") -> Packet:
    return Packet(command_id=command, payload=payload)


def build_command(command: CommandID, payload: bytes = b"") -> bytes:
    """Build a complete frame for a command."""
    return build_frame(build_packet(command, payload))


def ping_packet() -> Packet:
    """Build a Ping (0) packet with an empty payload."""
    return build_packet(CommandID.PING)


def write_register_packet(address: int, value: int) -> Packet:
    """Build a WriteRegister packet.

    Args:
        address: Register address 0x00-0xFF.
        value: Register contents 0-255.
    """
    frame = WriteRegisterFrame(address=address, value=value)
    return build_packet(CommandID.WRITE_REGISTER, frame.to_bytes())


def read_register_packet(address: int) -> Packet:
    """Build a ReadRegister packet for one register address."""
    return build_packet(CommandID.READ_REGISTER, ReadRegisterFrame(address).to_bytes())


def perform_action_packet(action: Action) -> Packet:
    """Build a PerformAction packet carrying a single command strobe."""
    if not isinstance(action, Action):
        try:
            action = Action(action)
        except ValueError:
            raise SerializationError(
                f"Unknown action {action!r}. Valid: {[a.name for a in Action]}"
            ) from None
    return build_packet(CommandID.PERFORM_ACTION, bytes([action]))
