"""Bit-field codecs for single-register settings.

Every encoder takes the current register byte and returns the new one.
Inputs outside the permitted set return the byte unchanged.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# MDMCFG2
MODULATION_MASK = 0x70
MODULATION_SHIFT = 4
MANCHESTER_MASK = 0x08

# PKTCTRL0
WHITENING_MASK = 0x40

# DEVIATN, MSK only
PHASE_TRANSITION_MASK = 0x07

MODULATION_FORMATS: Mapping[str, int] = MappingProxyType({
    "2-FSK": 0b000,
    "GFSK": 0b001,
    "MSK": 0b111,
})

# Recommended PATABLE settings at 2.4 GHz (CC2500 datasheet, table 31).
# -55 dBm is the "power down" entry.
TX_POWER_TABLE: Mapping[int, int] = MappingProxyType({
    1: 0xFF,
    0: 0xFE,
    -2: 0xBB,
    -4: 0xA9,
    -6: 0x7F,
    -8: 0x6E,
    -10: 0x97,
    -12: 0xC6,
    -14: 0x8D,
    -16: 0x55,
    -18: 0x93,
    -20: 0x46,
    -22: 0x81,
    -24: 0x84,
    -26: 0xC0,
    -28: 0x44,
    -30: 0x50,
    -55: 0x00,
})

_TX_POWER_BY_BYTE = {value: dbm for dbm, value in TX_POWER_TABLE.items()}


def set_flag(byte: int, mask: int, enabled: bool) -> int:
    """Set or clear ``mask`` in ``byte``."""
    if enabled:
        return byte | mask
    return byte & ~mask & 0xFF


def encode_modulation(mdmcfg2: int, scheme: str) -> int:
    """Write MOD_FORMAT (bits 6-4) for ``scheme``."""
    bits = MODULATION_FORMATS.get(scheme)
    if bits is None:
        return mdmcfg2
    return (mdmcfg2 & ~MODULATION_MASK & 0xFF) | (bits << MODULATION_SHIFT)


def decode_modulation(mdmcfg2: int) -> str | None:
    bits = (mdmcfg2 & MODULATION_MASK) >> MODULATION_SHIFT
    for name, value in MODULATION_FORMATS.items():
        if value == bits:
            return name
    return None


def encode_tx_power(pa_table0: int, dbm: int) -> int:
    """Look up the PATABLE byte for ``dbm``."""
    return TX_POWER_TABLE.get(dbm, pa_table0)


def decode_tx_power(pa_table0: int) -> int | None:
    return _TX_POWER_BY_BYTE.get(pa_table0)


def encode_whitening(pktctrl0: int, enabled: bool) -> int:
    return set_flag(pktctrl0, WHITENING_MASK, enabled)


def decode_whitening(pktctrl0: int) -> bool:
    return bool(pktctrl0 & WHITENING_MASK)


def encode_manchester(mdmcfg2: int, enabled: bool) -> int:
    return set_flag(mdmcfg2, MANCHESTER_MASK, enabled)


def decode_manchester(mdmcfg2: int) -> bool:
    return bool(mdmcfg2 & MANCHESTER_MASK)


def encode_phase_transition(deviatn: int, eighths: int) -> int:
    """Write the MSK phase transition time (bits 2-0 of DEVIATN).

    Args:
        deviatn: Current DEVIATN byte.
        eighths: Fraction of the symbol period, 0-7.
    """
    if not isinstance(eighths, int) or not 0 <= eighths <= 7:
        return deviatn
    return (deviatn & ~PHASE_TRANSITION_MASK & 0xFF) | eighths


def decode_phase_transition(deviatn: int) -> int:
    return deviatn & PHASE_TRANSITION_MASK
