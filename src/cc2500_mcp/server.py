"""MCP server entry point for a CC2500 radio behind a serial bridge.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from .codecs.fields import MODULATION_FORMATS, TX_POWER_TABLE
from .dispatcher import CommandDispatcher
from .errors import InvalidInput, SerializationError, TransportError
from .models.registers import REGISTER_ADDRESSES
from .protocol.commands import Action
from .session import RadioSession
from .transport.serial_connection import DEFAULT_BAUDRATE, SerialConnection, list_ports
from .validation import QUANTITY_RANGES

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "cc2500",
    instructions="MCP server for configuring a CC2500 2.4 GHz transceiver over serial",
)

# Global connection state
_connection: SerialConnection | None = None
_session = RadioSession()


def _get_connection() -> SerialConnection:
    """Get the active serial connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to device. Use the 'connect' tool first."
        )
    return _connection


def _edit(apply, *args) -> dict[str, Any]:
    """Run a session edit and report the registers it wrote."""
    try:
        written = apply(*args)
    except InvalidInput as e:
        return e.to_dict()
    except (SerializationError, TransportError) as e:
        return {"error": str(e)}
    return {
        "registers": {name: f"0x{value:02X}" for name, value in written.items()},
        "sent": _session.online,
        "settings": _session.settings().to_dict(),
    }


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def list_serial_ports() -> dict[str, Any]:
    """List the serial ports available on this machine."""
    return {"ports": list_ports()}


@mcp.tool()
def connect(port: str | None = None, baudrate: int | None = None) -> dict[str, Any]:
    """Open the serial link to the radio bridge.

    Register edits made while disconnected stay in the local register map;
    use sync_registers afterwards to push them.

    Args:
        port: Serial device, e.g. /dev/ttyUSB0 or COM8. Defaults to
              $CC2500_SERIAL_PORT.
        baudrate: Link speed. Defaults to $CC2500_BAUDRATE or 9600.
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "port": _connection.port_info.port,
        }

    port = port or os.environ.get("CC2500_SERIAL_PORT")
    if not port:
        return {"error": "No port given and CC2500_SERIAL_PORT is not set"}
    if baudrate is None:
        baudrate = int(os.environ.get("CC2500_BAUDRATE", DEFAULT_BAUDRATE))

    connection = SerialConnection(port, baudrate)
    try:
        info = connection.open()
    except TransportError as e:
        return {"error": str(e)}

    _connection = connection
    _session.attach(CommandDispatcher(connection))
    return {"connected": True, "port": info.port, "baudrate": info.baudrate}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the serial link. The register map is kept."""
    global _connection
    _session.detach()
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


@mcp.tool()
def ping() -> dict[str, Any]:
    """Send a Ping command to the bridge."""
    try:
        _session.ping()
    except TransportError as e:
        return {"error": str(e)}
    return {"sent": True}


# ─── RADIO PARAMETER TOOLS ────────────────────────────────────────────

@mcp.tool()
def set_frequency(frequency_mhz: str) -> dict[str, Any]:
    """Set the carrier frequency.

    Args:
        frequency_mhz: Frequency in MHz, 2400.0-2483.5 (e.g. "2464.0").
    """
    return _edit(_session.set_frequency, frequency_mhz)


@mcp.tool()
def set_deviation(deviation_khz: str) -> dict[str, Any]:
    """Set the FSK/GFSK frequency deviation.

    Args:
        deviation_khz: Deviation in kHz, 1.6-381.0.
    """
    return _edit(_session.set_deviation, deviation_khz)


@mcp.tool()
def set_data_rate(data_rate_kbaud: str) -> dict[str, Any]:
    """Set the symbol rate.

    Args:
        data_rate_kbaud: Data rate in kBaud, 0.025-1622.0.
    """
    return _edit(_session.set_data_rate, data_rate_kbaud)


@mcp.tool()
def set_modulation(scheme: str) -> dict[str, Any]:
    """Select the modulation format.

    Args:
        scheme: One of "2-FSK", "GFSK", "MSK".
    """
    return _edit(_session.set_modulation, scheme)


@mcp.tool()
def set_channel(channel: str) -> dict[str, Any]:
    """Set the channel number (0-255) written to CHANNR."""
    return _edit(_session.set_channel, channel)


@mcp.tool()
def set_tx_power(dbm: int) -> dict[str, Any]:
    """Set output power from the PATABLE lookup.

    Args:
        dbm: One of 1, 0, -2, -4, ... -30, or -55 (power down).
    """
    return _edit(_session.set_tx_power, dbm)


@mcp.tool()
def set_whitening(enabled: bool) -> dict[str, Any]:
    """Enable or disable data whitening."""
    return _edit(_session.set_whitening, enabled)


@mcp.tool()
def set_manchester(enabled: bool) -> dict[str, Any]:
    """Enable or disable Manchester encoding."""
    return _edit(_session.set_manchester, enabled)


@mcp.tool()
def set_phase_transition_time(eighths: int) -> dict[str, Any]:
    """Set the MSK phase transition time (only while MSK is selected).

    Args:
        eighths: Fraction of the symbol period, 0-7.
    """
    return _edit(_session.set_phase_transition_time, eighths)


# ─── REGISTER TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def write_register(register: str, value: int) -> dict[str, Any]:
    """Write a raw byte to a named register.

    Args:
        register: Register name, e.g. "PKTLEN".
        value: Byte value 0-255.
    """
    return _edit(_session.write_register, register.upper(), value)


@mcp.tool()
def read_register(register: str) -> dict[str, Any]:
    """Send a ReadRegister command and return the locally held value.

    Device replies are collected raw; see get_received_data.
    """
    name = register.upper()
    try:
        value = _session.read_register(name)
    except InvalidInput as e:
        return e.to_dict()
    except (SerializationError, TransportError) as e:
        return {"error": str(e)}
    return {
        "register": name,
        "address": f"0x{REGISTER_ADDRESSES[name]:02X}",
        "value": f"0x{value:02X}",
        "sent": _session.online,
    }


@mcp.tool()
def perform_action(action: str) -> dict[str, Any]:
    """Send a command strobe (SRES, SCAL, SRX, STX, SIDLE, ...)."""
    try:
        strobe = _session.perform_action(action)
    except InvalidInput as e:
        return e.to_dict()
    except TransportError as e:
        return {"error": str(e)}
    return {"action": strobe.name, "strobe": f"0x{strobe.value:02X}"}


@mcp.tool()
def sync_registers() -> dict[str, Any]:
    """Write every register in the local map to the device."""
    try:
        count = _session.sync()
    except TransportError as e:
        return {"error": str(e)}
    return {"sent": count}


@mcp.tool()
def get_registers(changed_only: bool = False) -> dict[str, Any]:
    """Return the local register map.

    Args:
        changed_only: Only list registers that differ from the reset value.
    """
    registers = _session.registers
    if changed_only:
        return {
            "registers": {
                name: f"0x{value:02X}"
                for name, value in registers.changed_from_reset().items()
            }
        }
    return {"registers": registers.to_dict()}


@mcp.tool()
def get_radio_settings() -> dict[str, Any]:
    """Decode the register map into frequency, deviation, data rate, etc."""
    return {"settings": _session.settings().to_dict()}


@mcp.tool()
def get_received_data() -> dict[str, Any]:
    """Return all bytes received from the bridge so far."""
    conn = _get_connection()
    fresh = conn.drain()
    data = conn.received_data
    return {
        "new_bytes": len(fresh),
        "hex": data.hex(" "),
        "text": data.decode("utf-8", errors="replace"),
    }


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("cc2500://device/status")
def resource_device_status() -> str:
    """Connection state."""
    connected = _connection is not None and _connection.connected
    status: dict[str, Any] = {"connected": connected}
    if connected:
        status["port"] = _connection.port_info.port
        status["baudrate"] = _connection.port_info.baudrate
    return json.dumps(status)


@mcp.resource("cc2500://registers/map")
def resource_register_map() -> str:
    """Every register with its address and current value."""
    return json.dumps({"registers": _session.registers.to_dict()})


@mcp.resource("cc2500://radio/settings")
def resource_radio_settings() -> str:
    """Decoded radio settings."""
    return json.dumps({"settings": _session.settings().to_dict()})


@mcp.resource("cc2500://catalog/tx-power")
def resource_tx_power_catalog() -> str:
    """Supported output power levels and their PATABLE bytes."""
    levels = [
        {"dbm": dbm, "pa_table": f"0x{value:02X}"}
        for dbm, value in TX_POWER_TABLE.items()
    ]
    return json.dumps({"levels": levels})


@mcp.resource("cc2500://catalog/modulations")
def resource_modulation_catalog() -> str:
    """Supported modulation formats, quantity ranges and strobes."""
    return json.dumps({
        "modulations": list(MODULATION_FORMATS),
        "ranges": {
            name: {"min": r.minimum, "max": r.maximum, "unit": r.unit}
            for name, r in QUANTITY_RANGES.items()
        },
        "actions": [a.name for a in Action],
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def configure_link(data_rate_kbaud: str, channel: int = 0) -> str:
    """Guide the AI through configuring a point-to-point link.

    Args:
        data_rate_kbaud: Target data rate.
        channel: Channel number.
    """
    return f"""Configure the radio for a {data_rate_kbaud} kBaud link on channel {channel}.
Consider:
- Carrier frequency in 2400.0-2483.5 MHz (set_frequency)
- Modulation: GFSK or 2-FSK for low rates, MSK above ~250 kBaud (set_modulation)
- Deviation of roughly half the data rate for 2-FSK/GFSK (set_deviation)
- Whitening on for random-looking payloads (set_whitening)
- TX power from the cc2500://catalog/tx-power resource (set_tx_power)

Check get_radio_settings after each change; values are quantized by the chip.
Use connect then sync_registers to push the map to the device."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=os.environ.get("CC2500_LOG_LEVEL", "INFO").upper())
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
