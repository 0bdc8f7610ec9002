"""Command dispatcher: typed command -> packet -> frame -> transport.

Exactly one frame is written per call. There is no retry and no wait for
an acknowledgement.
"""

from __future__ import annotations

import logging

from .protocol.commands import (
    Action,
    perform_action_packet,
    ping_packet,
    read_register_packet,
    write_register_packet,
)
from .protocol.framing import Packet, build_frame

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Sends framed commands through a transport.

    Args:
        transport: Any object with a ``write(data: bytes)`` method, usually
            a :class:`~cc2500_mcp.transport.SerialConnection`.
    """

    def __init__(self, transport) -> None:
        self._transport = transport

    @property
    def transport(self):
        return self._transport

    def dispatch(self, packet: Packet) -> bytes:
        """Frame ``packet`` and write it.

        Returns:
            The frame that was written.

        Raises:
            SerializationError: If the packet cannot be serialized; nothing
                is written.
            TransportError: If the transport write fails.
        """
        frame = build_frame(packet)
        logger.debug("Dispatching %r as %s", packet, frame.hex(" "))
        self._transport.write(frame)
        return frame

    def ping(self) -> bytes:
        return self.dispatch(ping_packet())

    def write_register(self, address: int, value: int) -> bytes:
        """Send WRITE_REGISTER for a single register."""
        return self.dispatch(write_register_packet(address, value))

    def read_register(self, address: int) -> bytes:
        return self.dispatch(read_register_packet(address))

    def perform_action(self, action: Action) -> bytes:
        """Send a command strobe, e.g. ``Action.SIDLE``."""
        return self.dispatch(perform_action_packet(action))
