"""Tests for the CRC-8 frame trailer."""

from cc2500_mcp.utils.crc import crc8, CRC8_TABLE


def test_crc8_empty():
    """CRC of empty data should be the initial value."""
    assert crc8(b"") == 0x00


def test_crc8_check_value():
    """CRC-8/SMBUS check value over the ASCII digits 1-9."""
    assert crc8(b"123456789") == 0xF4


def test_crc8_single_byte_is_table_entry():
    """With a zero initial value, one byte maps straight to its table entry."""
    assert crc8(b"\x01") == 0x07
    assert crc8(b"\x80") == CRC8_TABLE[0x80]


def test_crc8_incremental():
    """Checksumming in pieces should match a single pass."""
    data = b"\x01\x02\x0D\x5E"
    assert crc8(data[2:], initial=crc8(data[:2])) == crc8(data)


def test_crc8_different_inputs():
    """Different inputs should produce different CRCs."""
    assert crc8(b"\x01\x02\x0D\x5E") != crc8(b"\x01\x02\x0D\x5F")


def test_crc8_range():
    assert all(0 <= crc8(bytes([b, b ^ 0xFF])) <= 0xFF for b in range(256))
