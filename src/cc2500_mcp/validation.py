"""Validation gate for user-entered text.

Every quantity is parsed and range-checked here before any codec runs,
so rejected input never reaches the register map.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvalidInput


@dataclass(frozen=True)
class QuantityRange:
    """Inclusive valid range of a physical quantity."""

    minimum: float
    maximum: float
    unit: str

    @property
    def bounds(self) -> tuple[float, float]:
        return self.minimum, self.maximum

    def __contains__(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


QUANTITY_RANGES: dict[str, QuantityRange] = {
    "frequency": QuantityRange(2400.0, 2483.5, "MHz"),
    "deviation": QuantityRange(1.6, 381.0, "kHz"),
    "data_rate": QuantityRange(0.025, 1622.0, "kBaud"),
}

CHANNEL_RANGE = (0, 255)


def parse_quantity(quantity: str, text: str | float) -> float:
    """Parse ``text`` as a number and range-check it.

    Args:
        quantity: One of ``frequency``, ``deviation``, ``data_rate``.
        text: User input, e.g. ``"2464.0"``.

    Returns:
        The parsed value in the quantity's unit.

    Raises:
        InvalidInput: If ``text`` is not a finite number or is out of range.
    """
    if quantity not in QUANTITY_RANGES:
        raise ValueError(f"Unknown quantity '{quantity}'. Valid: {list(QUANTITY_RANGES)}")
    valid = QUANTITY_RANGES[quantity]

    try:
        value = float(text)
    except (TypeError, ValueError):
        raise InvalidInput(quantity, f"{text!r} is not a number", valid.bounds) from None

    if not math.isfinite(value):
        raise InvalidInput(quantity, f"{text!r} is not a finite number", valid.bounds)
    if value not in valid:
        raise InvalidInput(
            quantity,
            f"{value:g} {valid.unit} is outside "
            f"{valid.minimum:g}-{valid.maximum:g} {valid.unit}",
            valid.bounds,
        )
    return value


def parse_channel(text: str | int) -> int:
    """Parse a channel number (0-255)."""
    low, high = CHANNEL_RANGE
    if isinstance(text, bool):
        raise InvalidInput("channel", f"{text!r} is not an integer", CHANNEL_RANGE)
    try:
        channel = int(text)
    except (TypeError, ValueError):
        raise InvalidInput("channel", f"{text!r} is not an integer", CHANNEL_RANGE) from None
    if not low <= channel <= high:
        raise InvalidInput("channel", f"{channel} is outside {low}-{high}", CHANNEL_RANGE)
    return channel
