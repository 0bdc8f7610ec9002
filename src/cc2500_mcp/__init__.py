"""Register encoding, command framing, and MCP server for the CC2500 transceiver."""

__version__ = "0.1.0"
