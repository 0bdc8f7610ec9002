"""CRC-8 used as the frame trailer.

Polynomial 0x07, initial value 0x00, no reflection, no final XOR
(CRC-8/SMBUS). Check value for ``b"123456789"`` is 0xF4.
"""

from __future__ import annotations

CRC8_POLY = 0x07


def _build_table(poly: int) -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ poly) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
        table.append(crc)
    return tuple(table)


CRC8_TABLE = _build_table(CRC8_POLY)


def crc8(data: bytes, initial: int = 0x00) -> int:
    """Compute the CRC-8 of ``data``.

    Args:
        data: Bytes to checksum.
        initial: Starting register value, for checksumming in pieces.

    Returns:
        Checksum in the range 0-255.
    """
    crc = initial & 0xFF
    for byte in data:
        crc = CRC8_TABLE[crc ^ byte]
    return crc
