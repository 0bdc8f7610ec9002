"""Tests for the command dispatcher."""

from unittest.mock import MagicMock

import pytest

from cc2500_mcp.dispatcher import CommandDispatcher
from cc2500_mcp.errors import SerializationError, TransportError
from cc2500_mcp.protocol.commands import Action, CommandID, WriteRegisterFrame
from cc2500_mcp.protocol.framing import Packet, parse_frame


def _sent(transport) -> Packet:
    transport.write.assert_called_once()
    frame = transport.write.call_args.args[0]
    parsed = parse_frame(frame)
    assert parsed is not None
    return parsed


def test_write_register_sends_one_frame():
    transport = MagicMock()
    frame = CommandDispatcher(transport).write_register(0x0D, 0x5E)
    assert frame[0] == 0x45
    packet = _sent(transport)
    assert packet.command_id == CommandID.WRITE_REGISTER
    assert WriteRegisterFrame.from_bytes(packet.payload) == WriteRegisterFrame(0x0D, 0x5E)


def test_ping():
    transport = MagicMock()
    CommandDispatcher(transport).ping()
    transport.write.assert_called_once_with(b"\x45\x00\x00\x00")


def test_read_register():
    transport = MagicMock()
    CommandDispatcher(transport).read_register(0x3E)
    packet = _sent(transport)
    assert packet.command_id == CommandID.READ_REGISTER
    assert packet.payload == b"\x3E"


def test_perform_action():
    transport = MagicMock()
    CommandDispatcher(transport).perform_action(Action.STX)
    packet = _sent(transport)
    assert packet.command_id == CommandID.PERFORM_ACTION
    assert packet.payload == bytes([0x35])


def test_serialization_error_sends_nothing():
    transport = MagicMock()
    with pytest.raises(SerializationError):
        CommandDispatcher(transport).write_register(0x1FF, 0)
    transport.write.assert_not_called()


def test_transport_error_is_surfaced():
    transport = MagicMock()
    transport.write.side_effect = TransportError("port gone")
    dispatcher = CommandDispatcher(transport)
    with pytest.raises(TransportError):
        dispatcher.ping()
    # no automatic retry
    assert transport.write.call_count == 1
