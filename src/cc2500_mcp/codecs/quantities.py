"""Physical quantity <-> register field codecs.

The CC2500 expresses frequency, deviation and data rate as integer
multiples of ``f_xosc / 2**N``::

    f_carrier = f_xosc / 2**16 * FREQ[23:0]
    f_dev     = f_xosc / 2**17 * (8 + DEVIATION_M) * 2**DEVIATION_E
    R_data    = f_xosc / 2**28 * (256 + DRATE_M) * 2**DRATE_E

Each quantity gets a :class:`FixedPointScale` whose ``reference`` is the
crystal frequency in that quantity's own unit, so ``step`` (one tick)
is an exact binary fraction and decode/re-encode reproduces the same
register bytes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import EncodingOverflow

CRYSTAL_MHZ = 26.0

FREQUENCY_BITS = 24
DEVIATION_MANTISSA_BITS = 3
DEVIATION_EXPONENT_MAX = 7
DATA_RATE_MANTISSA_BITS = 8
DATA_RATE_EXPONENT_MAX = 15


@dataclass(frozen=True)
class FixedPointScale:
    """Conversion between a physical unit and chip ticks."""

    bits: int
    reference: float  # crystal frequency in the quantity's unit

    @property
    def step(self) -> float:
        """Value of a single tick."""
        return self.reference / (1 << self.bits)

    def to_ticks(self, value: float) -> float:
        return value / self.step

    def from_ticks(self, ticks: int) -> float:
        return ticks * self.step


FREQUENCY_SCALE = FixedPointScale(16, CRYSTAL_MHZ)            # MHz
DEVIATION_SCALE = FixedPointScale(17, CRYSTAL_MHZ * 1000)     # kHz
DATA_RATE_SCALE = FixedPointScale(28, CRYSTAL_MHZ * 1000)     # kBaud


def _split_exponent(
    quantity: str,
    ticks: float,
    mantissa_bits: int,
    exponent_max: int,
) -> tuple[int, int]:
    """Split ``ticks`` into ``(exponent, mantissa)`` with
    ``ticks ~= (2**mantissa_bits + mantissa) * 2**exponent``.

    The exponent is ``floor(log2(ticks / 2**mantissa_bits))``; the
    mantissa is rounded to nearest and carries into the exponent.
    """
    base = 1 << mantissa_bits
    if not math.isfinite(ticks):
        raise EncodingOverflow(quantity, f"{ticks} is not a finite tick count")

    whole = math.floor(ticks)
    if whole < base:
        # log2(ticks / base) would be negative or undefined
        raise EncodingOverflow(
            quantity,
            f"{ticks:.3f} ticks is below the smallest encodable value ({base})",
        )

    exponent = whole.bit_length() - 1 - mantissa_bits
    mantissa = round(ticks / (1 << exponent)) - base
    if mantissa == base:
        exponent += 1
        mantissa = 0

    if exponent > exponent_max:
        raise EncodingOverflow(
            quantity,
            f"exponent {exponent} does not fit the field (max {exponent_max})",
        )
    return exponent, mantissa


# --- Frequency -------------------------------------------------------------

def encode_frequency(
    freq_mhz: float, scale: FixedPointScale = FREQUENCY_SCALE
) -> tuple[int, int, int]:
    """Encode a carrier frequency into ``(FREQ2, FREQ1, FREQ0)``.

    The 24-bit word is truncated, never rounded up.
    """
    ticks = scale.to_ticks(freq_mhz)
    if not math.isfinite(ticks):
        raise EncodingOverflow("frequency", f"{freq_mhz} MHz is not finite")
    word = math.floor(ticks)
    if not 0 <= word < 1 << FREQUENCY_BITS:
        raise EncodingOverflow(
            "frequency",
            f"{freq_mhz} MHz does not fit the {FREQUENCY_BITS}-bit FREQ field",
        )
    return (word >> 16) & 0xFF, (word >> 8) & 0xFF, word & 0xFF


def decode_frequency(
    freq2: int, freq1: int, freq0: int, scale: FixedPointScale = FREQUENCY_SCALE
) -> float:
    """Decode ``(FREQ2, FREQ1, FREQ0)`` to MHz."""
    word = (freq2 << 16) | (freq1 << 8) | freq0
    return scale.from_ticks(word)


# --- Deviation -------------------------------------------------------------

def encode_deviation(
    deviation_khz: float, scale: FixedPointScale = DEVIATION_SCALE
) -> int:
    """Encode a frequency deviation into a DEVIATN byte.

    Bits 6-4 hold DEVIATION_E, bits 2-0 DEVIATION_M; bits 7 and 3 are 0.
    """
    exponent, mantissa = _split_exponent(
        "deviation",
        scale.to_ticks(deviation_khz),
        DEVIATION_MANTISSA_BITS,
        DEVIATION_EXPONENT_MAX,
    )
    return (exponent << 4) | mantissa


def decode_deviation(deviatn: int, scale: FixedPointScale = DEVIATION_SCALE) -> float:
    """Decode a DEVIATN byte to kHz."""
    exponent = (deviatn >> 4) & 0x07
    mantissa = deviatn & 0x07
    return scale.from_ticks((8 + mantissa) << exponent)


# --- Data rate -------------------------------------------------------------

def encode_data_rate(
    rate_kbaud: float, scale: FixedPointScale = DATA_RATE_SCALE
) -> tuple[int, int]:
    """Encode a symbol rate into ``(DRATE_E, DRATE_M)``."""
    return _split_exponent(
        "data_rate",
        scale.to_ticks(rate_kbaud),
        DATA_RATE_MANTISSA_BITS,
        DATA_RATE_EXPONENT_MAX,
    )


def apply_data_rate(
    mdmcfg4: int, rate_kbaud: float, scale: FixedPointScale = DATA_RATE_SCALE
) -> tuple[int, int]:
    """Return updated ``(MDMCFG4, MDMCFG3)`` for ``rate_kbaud``.

    Only the low nibble of MDMCFG4 changes; the high nibble holds the
    channel bandwidth setting.
    """
    exponent, mantissa = encode_data_rate(rate_kbaud, scale)
    return (mdmcfg4 & 0xF0) | exponent, mantissa


def decode_data_rate(
    mdmcfg4: int, mdmcfg3: int, scale: FixedPointScale = DATA_RATE_SCALE
) -> float:
    """Decode ``(MDMCFG4, MDMCFG3)`` to kBaud."""
    exponent = mdmcfg4 & 0x0F
    return scale.from_ticks((256 + mdmcfg3) << exponent)
