"""Serial connection to the radio bridge.

Frames are written synchronously from the caller's thread. Incoming
bytes are read by one background thread and handed over through an
unbounded FIFO queue; the caller collects them with :meth:`drain`.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass

import serial
from serial.tools import list_ports as serial_list_ports

from ..errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 9600
READ_TIMEOUT_S = 0.05
READER_JOIN_TIMEOUT_S = 1.0


@dataclass
class PortInfo:
    """Settings of the open serial port."""

    port: str = ""
    baudrate: int = DEFAULT_BAUDRATE


def list_ports() -> list[str]:
    """Return the device names of all serial ports on this machine."""
    return [p.device for p in serial_list_ports.comports()]


class SerialConnection:
    """Manages the serial link to the device.

    Usage::

        conn = SerialConnection("/dev/ttyUSB0")
        conn.open()
        conn.write(frame_bytes)
        new_bytes = conn.drain()
        conn.close()
    """

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE) -> None:
        self._port_info = PortInfo(port=port, baudrate=baudrate)
        self._serial: serial.Serial | None = None
        self._rx: queue.Queue[int] = queue.Queue()
        self._received = bytearray()
        self._stop = threading.Event()
        self._reader: threading.Thread | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    @property
    def port_info(self) -> PortInfo:
        return self._port_info

    @property
    def received_data(self) -> bytes:
        """Every byte drained so far, oldest first."""
        return bytes(self._received)

    def open(self) -> PortInfo:
        """Open the port and start the background reader.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self.connected:
            return self._port_info
        try:
            self._serial = serial.Serial(
                port=self._port_info.port,
                baudrate=self._port_info.baudrate,
                timeout=READ_TIMEOUT_S,
            )
        except (serial.SerialException, OSError) as e:
            raise TransportError(
                f"Could not open serial port {self._port_info.port!r} "
                f"at {self._port_info.baudrate} baud: {e}"
            ) from e

        self._stop.clear()
        self._reader = threading.Thread(
            target=self._read_loop, name="cc2500-serial-reader", daemon=True
        )
        self._reader.start()

        logger.info(
            "Connected to %s at %d baud",
            self._port_info.port,
            self._port_info.baudrate,
        )
        return self._port_info

    def close(self) -> None:
        """Stop the reader and close the port."""
        if self._serial is None:
            return

        self._stop.set()
        if self._reader is not None and self._reader is not threading.current_thread():
            self._reader.join(timeout=READER_JOIN_TIMEOUT_S)
        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing serial port: %s", e)
        finally:
            self._serial = None
            self._reader = None
            logger.info("Disconnected")

    def write(self, data: bytes) -> int:
        """Write a frame to the device, blocking until it is handed off.

        Returns:
            Number of bytes written.

        Raises:
            TransportError: If not connected or the write fails.
        """
        if not self.connected:
            raise TransportError("Not connected to device")

        try:
            written = self._serial.write(data)
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Serial write failed: {e}") from e

        logger.debug("Sent %d bytes: %s", written or 0, bytes(data).hex(" "))
        return written

    def drain(self) -> bytes:
        """Collect every byte the reader has queued, without blocking.

        Returns:
            The newly received bytes (also appended to ``received_data``).
        """
        fresh = bytearray()
        while True:
            try:
                fresh.append(self._rx.get_nowait())
            except queue.Empty:
                break
        self._received.extend(fresh)
        return bytes(fresh)

    def clear_received(self) -> None:
        self._received.clear()

    def _read_loop(self) -> None:
        port = self._serial
        while not self._stop.is_set():
            try:
                chunk = port.read(port.in_waiting or 1)
            except (serial.SerialException, OSError, TypeError) as e:
                # TypeError: pyserial raises it when the handle is closed under us
                if not self._stop.is_set():
                    logger.warning("Serial reader stopped: %s", e)
                break
            for byte in chunk:
                logger.debug("Received byte: %d", byte)
                self._rx.put(byte)
        logger.debug("Serial reader exited")

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
