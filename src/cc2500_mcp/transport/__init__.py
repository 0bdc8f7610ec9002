"""Serial transport to the radio bridge."""

from .serial_connection import SerialConnection, list_ports
