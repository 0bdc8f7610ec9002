"""Tests for the MCP tool layer, with FastMCP and the serial port mocked."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

from cc2500_mcp.protocol.commands import write_register_packet
from cc2500_mcp.protocol.framing import build_frame
from cc2500_mcp.transport.serial_connection import PortInfo


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("cc2500_mcp.server", None)
            import cc2500_mcp.server as server_mod

    return server_mod


def _connected_server():
    """Return a server module connected to a mock serial connection."""
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.connected = True
    mock_conn.open.return_value = PortInfo(port="/dev/ttyUSB0", baudrate=9600)
    mock_conn.port_info = PortInfo(port="/dev/ttyUSB0", baudrate=9600)

    with patch.object(server, "SerialConnection", return_value=mock_conn):
        result = server.connect("/dev/ttyUSB0")
    assert result["connected"] is True
    return server, mock_conn


def test_offline_frequency_edit():
    """Without a connection, edits update the register map only."""
    server = _get_server_module()
    result = server.set_frequency("2400.0")
    assert result["registers"] == {"FREQ2": "0x5C", "FREQ1": "0x4E", "FREQ0": "0xC4"}
    assert result["sent"] is False
    assert result["settings"]["frequency_mhz"] == round(0x5C4EC4 * 26 / 65536, 6)


def test_invalid_frequency_reports_bounds():
    server = _get_server_module()
    result = server.set_frequency("9999")
    assert "error" in result
    assert result["quantity"] == "frequency"
    assert result["min"] == 2400.0
    assert result["max"] == 2483.5
    assert server.get_registers(changed_only=True) == {"registers": {}}


def test_unknown_modulation_reports_error():
    server = _get_server_module()
    result = server.set_modulation("QPSK")
    assert "error" in result
    assert result["quantity"] == "modulation"


def test_connect_without_port(monkeypatch):
    monkeypatch.delenv("CC2500_SERIAL_PORT", raising=False)
    server = _get_server_module()
    assert "error" in server.connect()


def test_connect_uses_environment(monkeypatch):
    monkeypatch.setenv("CC2500_SERIAL_PORT", "/dev/ttyACM0")
    monkeypatch.setenv("CC2500_BAUDRATE", "115200")
    server = _get_server_module()
    mock_conn = MagicMock()
    mock_conn.open.return_value = PortInfo(port="/dev/ttyACM0", baudrate=115200)
    with patch.object(server, "SerialConnection", return_value=mock_conn) as cls:
        result = server.connect()
    cls.assert_called_once_with("/dev/ttyACM0", 115200)
    assert result == {"connected": True, "port": "/dev/ttyACM0", "baudrate": 115200}


def test_connected_edit_writes_frame():
    server, mock_conn = _connected_server()
    result = server.set_channel("5")
    assert result["sent"] is True
    mock_conn.write.assert_called_once_with(build_frame(write_register_packet(0x0A, 5)))


def test_write_register_tool():
    server, mock_conn = _connected_server()
    result = server.write_register("pktlen", 32)
    assert result["registers"] == {"PKTLEN": "0x20"}
    mock_conn.write.assert_called_once_with(build_frame(write_register_packet(0x06, 32)))


def test_write_register_bad_value():
    server, mock_conn = _connected_server()
    result = server.write_register("PKTLEN", 300)
    assert "error" in result
    mock_conn.write.assert_not_called()


def test_ping_requires_connection():
    server = _get_server_module()
    assert "error" in server.ping()


def test_perform_action_tool():
    server, mock_conn = _connected_server()
    result = server.perform_action("scal")
    assert result == {"action": "SCAL", "strobe": "0x33"}
    mock_conn.write.assert_called_once()


def test_sync_registers_tool():
    server, mock_conn = _connected_server()
    result = server.sync_registers()
    assert result["sent"] == mock_conn.write.call_count == 39


def test_disconnect_keeps_registers():
    server, mock_conn = _connected_server()
    server.set_tx_power(-55)
    assert server.disconnect() == {"disconnected": True}
    mock_conn.close.assert_called_once()
    assert server.get_radio_settings()["settings"]["tx_power_dbm"] == -55
    assert server.set_tx_power(0)["sent"] is False


def test_received_data_tool():
    server, mock_conn = _connected_server()
    mock_conn.drain.return_value = b"ok"
    mock_conn.received_data = b"ok"
    result = server.get_received_data()
    assert result == {"new_bytes": 2, "hex": "6f 6b", "text": "ok"}


def test_resources_are_json():
    import json

    server = _get_server_module()
    assert json.loads(server.resource_device_status()) == {"connected": False}
    registers = json.loads(server.resource_register_map())["registers"]
    assert registers["PA_TABLE0"]["address"] == "0x3E"
    levels = json.loads(server.resource_tx_power_catalog())["levels"]
    assert {"dbm": -55, "pa_table": "0x00"} in levels
    catalog = json.loads(server.resource_modulation_catalog())
    assert catalog["modulations"] == ["2-FSK", "GFSK", "MSK"]
