"""Radio settings decoded from the register map.

Always rebuilt from the register bytes, so the displayed values are
exactly what the chip will use after quantization.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..codecs.fields import (
    decode_manchester,
    decode_modulation,
    decode_phase_transition,
    decode_tx_power,
    decode_whitening,
)
from ..codecs.quantities import decode_data_rate, decode_deviation, decode_frequency
from .registers import RegisterMap


@dataclass
class RadioSettings:
    """Physical view of the current register contents."""

    frequency_mhz: float
    deviation_khz: float
    data_rate_kbaud: float
    modulation: str | None
    channel: int
    tx_power_dbm: int | None
    whitening: bool
    manchester: bool
    phase_transition_time: int | None

    @classmethod
    def from_registers(cls, registers: RegisterMap) -> RadioSettings:
        modulation = decode_modulation(registers["MDMCFG2"])
        return cls(
            frequency_mhz=decode_frequency(
                registers["FREQ2"], registers["FREQ1"], registers["FREQ0"]
            ),
            deviation_khz=decode_deviation(registers["DEVIATN"]),
            data_rate_kbaud=decode_data_rate(registers["MDMCFG4"], registers["MDMCFG3"]),
            modulation=modulation,
            channel=registers["CHANNR"],
            tx_power_dbm=decode_tx_power(registers["PA_TABLE0"]),
            whitening=decode_whitening(registers["PKTCTRL0"]),
            manchester=decode_manchester(registers["MDMCFG2"]),
            # DEVIATN bits 2-0 are the deviation mantissa outside MSK
            phase_transition_time=(
                decode_phase_transition(registers["DEVIATN"])
                if modulation == "MSK" else None
            ),
        )

    def to_dict(self) -> dict:
        return {
            "frequency_mhz": round(self.frequency_mhz, 6),
            "deviation_khz": round(self.deviation_khz, 3),
            "data_rate_kbaud": round(self.data_rate_kbaud, 3),
            "modulation": self.modulation,
            "channel": self.channel,
            "tx_power_dbm": self.tx_power_dbm,
            "whitening": self.whitening,
            "manchester": self.manchester,
            "phase_transition_time": self.phase_transition_time,
        }

    def __repr__(self) -> str:
        return (
            f"RadioSettings({self.frequency_mhz:.6f} MHz, "
            f"{self.modulation}, {self.data_rate_kbaud:.3f} kBaud)"
        )
