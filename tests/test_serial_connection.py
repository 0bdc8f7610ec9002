"""Tests for the pyserial transport, with the port mocked out."""

import time
from unittest.mock import MagicMock, patch

import pytest
import serial

from cc2500_mcp.errors import TransportError
from cc2500_mcp.transport.serial_connection import SerialConnection, list_ports

SERIAL_CLS = "cc2500_mcp.transport.serial_connection.serial.Serial"


def _fake_port(chunks=()):
    """A mock serial port that yields ``chunks`` once, then nothing."""
    pending = list(chunks)
    port = MagicMock()
    port.is_open = True
    port.in_waiting = 0

    def read(size):
        if pending:
            return pending.pop(0)
        time.sleep(0.005)
        return b""

    port.read.side_effect = read
    port.write.side_effect = lambda data: len(data)
    return port


def _drain_until(conn, count, timeout=2.0):
    received = b""
    deadline = time.monotonic() + timeout
    while len(received) < count and time.monotonic() < deadline:
        received += conn.drain()
        time.sleep(0.005)
    return received


def test_open_and_close():
    port = _fake_port()
    with patch(SERIAL_CLS, return_value=port) as serial_cls:
        conn = SerialConnection("/dev/ttyUSB0", 115200)
        info = conn.open()
        assert conn.connected
        assert info.port == "/dev/ttyUSB0"
        assert info.baudrate == 115200
        serial_cls.assert_called_once()
        conn.close()
    assert not conn.connected
    port.close.assert_called_once()


def test_open_failure_raises_transport_error():
    with patch(SERIAL_CLS, side_effect=serial.SerialException("no such port")):
        conn = SerialConnection("COM99")
        with pytest.raises(TransportError):
            conn.open()
    assert not conn.connected


def test_write():
    port = _fake_port()
    with patch(SERIAL_CLS, return_value=port):
        with SerialConnection("/dev/ttyUSB0") as conn:
            assert conn.write(b"\x45\x00\x00\x00") == 4
    port.write.assert_called_once_with(b"\x45\x00\x00\x00")
    port.flush.assert_called()


def test_write_when_closed():
    conn = SerialConnection("/dev/ttyUSB0")
    with pytest.raises(TransportError):
        conn.write(b"\x00")


def test_write_failure_raises_transport_error():
    port = _fake_port()
    port.write.side_effect = serial.SerialException("device reports readiness but returned no data")
    with patch(SERIAL_CLS, return_value=port):
        with SerialConnection("/dev/ttyUSB0") as conn:
            with pytest.raises(TransportError):
                conn.write(b"\x45")


def test_reader_bytes_are_drained_in_order():
    port = _fake_port([b"he", b"llo"])
    with patch(SERIAL_CLS, return_value=port):
        with SerialConnection("/dev/ttyUSB0") as conn:
            received = _drain_until(conn, 5)
            assert received == b"hello"
            assert conn.received_data == b"hello"
            assert conn.drain() == b""
            conn.clear_received()
            assert conn.received_data == b""


def test_reader_stops_on_serial_error():
    port = _fake_port()
    port.read.side_effect = serial.SerialException("unplugged")
    with patch(SERIAL_CLS, return_value=port):
        with SerialConnection("/dev/ttyUSB0") as conn:
            time.sleep(0.05)
            assert conn.drain() == b""


def test_list_ports():
    fake = [MagicMock(device="/dev/ttyUSB0"), MagicMock(device="/dev/ttyACM1")]
    with patch(
        "cc2500_mcp.transport.serial_connection.serial_list_ports.comports",
        return_value=fake,
    ):
        assert list_ports() == ["/dev/ttyUSB0", "/dev/ttyACM1"]
