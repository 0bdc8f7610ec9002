"""Codecs between physical quantities and CC2500 register bytes."""

from .quantities import (
    decode_data_rate,
    decode_deviation,
    decode_frequency,
    encode_data_rate,
    encode_deviation,
    encode_frequency,
)
