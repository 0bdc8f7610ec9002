"""CC2500 configuration register map.

Addresses and power-on reset values follow the CC2500 datasheet
(SWRS040). Only the registers touched by this tool are listed; the
status registers and the WOR/RC oscillator block are omitted.

::

    name        addr  reset
    IOCFG2      0x00  0x29
    ...
    FREQ2       0x0D  0x5E   \
    FREQ1       0x0E  0xC4    > 24-bit carrier word, 0x5EC4EC = 2464 MHz
    FREQ0       0x0F  0xEC   /
    MDMCFG4     0x10  0x8C   low nibble: DRATE_E
    MDMCFG3     0x11  0x22   DRATE_M
    MDMCFG2     0x12  0x02   bits 6-4: MOD_FORMAT, bit 3: MANCHESTER_EN
    DEVIATN     0x15  0x47   bits 6-4: DEVIATION_E, bits 2-0: DEVIATION_M
    ...
    PA_TABLE0   0x3E  0xC6
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from ..errors import InvalidInput

REGISTER_ADDRESSES: Mapping[str, int] = MappingProxyType({
    "IOCFG2": 0x00,
    "IOCFG1": 0x01,
    "IOCFG0": 0x02,
    "SYNC1": 0x04,
    "SYNC0": 0x05,
    "PKTLEN": 0x06,
    "PKTCTRL1": 0x07,
    "PKTCTRL0": 0x08,
    "ADDR": 0x09,
    "CHANNR": 0x0A,
    "FSCTRL1": 0x0B,
    "FSCTRL0": 0x0C,
    "FREQ2": 0x0D,
    "FREQ1": 0x0E,
    "FREQ0": 0x0F,
    "MDMCFG4": 0x10,
    "MDMCFG3": 0x11,
    "MDMCFG2": 0x12,
    "MDMCFG1": 0x13,
    "MDMCFG0": 0x14,
    "DEVIATN": 0x15,
    "MCSM2": 0x16,
    "MCSM1": 0x17,
    "MCSM0": 0x18,
    "FOCCFG": 0x19,
    "BSCFG": 0x1A,
    "AGCCTRL2": 0x1B,
    "AGCCTRL1": 0x1C,
    "AGCCTRL0": 0x1D,
    "FREND1": 0x21,
    "FREND0": 0x22,
    "FSCAL3": 0x23,
    "FSCAL2": 0x24,
    "FSCAL1": 0x25,
    "FSCAL0": 0x26,
    "TEST2": 0x2C,
    "TEST1": 0x2D,
    "TEST0": 0x2E,
    "PA_TABLE0": 0x3E,
})

RESET_VALUES: Mapping[str, int] = MappingProxyType({
    "IOCFG2": 0x29,
    "IOCFG1": 0x2E,
    "IOCFG0": 0x3F,
    "SYNC1": 0xD3,
    "SYNC0": 0x91,
    "PKTLEN": 0xFF,
    "PKTCTRL1": 0x04,
    "PKTCTRL0": 0x45,
    "ADDR": 0x00,
    "CHANNR": 0x00,
    "FSCTRL1": 0x0F,
    "FSCTRL0": 0x00,
    "FREQ2": 0x5E,
    "FREQ1": 0xC4,
    "FREQ0": 0xEC,
    "MDMCFG4": 0x8C,
    "MDMCFG3": 0x22,
    "MDMCFG2": 0x02,
    "MDMCFG1": 0x22,
    "MDMCFG0": 0xF8,
    "DEVIATN": 0x47,
    "MCSM2": 0x07,
    "MCSM1": 0x30,
    "MCSM0": 0x04,
    "FOCCFG": 0x36,
    "BSCFG": 0x6C,
    "AGCCTRL2": 0x03,
    "AGCCTRL1": 0x40,
    "AGCCTRL0": 0x91,
    "FREND1": 0x56,
    "FREND0": 0x10,
    "FSCAL3": 0xA9,
    "FSCAL2": 0x0A,
    "FSCAL1": 0x20,
    "FSCAL0": 0x0D,
    "TEST2": 0x88,
    "TEST1": 0x31,
    "TEST0": 0x0B,
    "PA_TABLE0": 0xC6,
})

_NAMES_BY_ADDRESS = {address: name for name, address in REGISTER_ADDRESSES.items()}


def address_of(name: str) -> int:
    """Return the hardware address of a register by name."""
    try:
        return REGISTER_ADDRESSES[name]
    except KeyError:
        raise InvalidInput(
            "register",
            f"unknown register {name!r}. Valid: {list(REGISTER_ADDRESSES)}",
        ) from None


def name_at(address: int) -> str | None:
    """Return the register name at ``address``, or None if not mapped."""
    return _NAMES_BY_ADDRESS.get(address)


@dataclass
class RegisterMap:
    """Current byte contents of every mapped register.

    Starts at the power-on reset values. Every write goes through
    :meth:`update`, which checks the whole group before applying any of
    it, so a failed write never leaves a multi-byte field half updated.
    """

    values: dict[str, int] = field(default_factory=lambda: dict(RESET_VALUES))

    def __post_init__(self) -> None:
        initial = self.values
        self.values = dict(RESET_VALUES)
        self.update(initial)

    def __getitem__(self, name: str) -> int:
        address_of(name)
        return self.values[name]

    def __setitem__(self, name: str, value: int) -> None:
        self.update({name: value})

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def update(self, changes: Mapping[str, int]) -> dict[str, int]:
        """Write a group of registers atomically.

        Args:
            changes: Register name to new byte value.

        Returns:
            The subset of ``changes`` whose value actually differed.

        Raises:
            InvalidInput: If any name is unknown or any value is not a
                byte. Nothing is written in that case.
        """
        for name, value in changes.items():
            address_of(name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(name, f"register value must be an int, got {value!r}")
            if not 0 <= value <= 0xFF:
                raise InvalidInput(name, f"register value must be 0-255, got {value}", (0, 255))

        changed = {
            name: value for name, value in changes.items()
            if self.values[name] != value
        }
        self.values.update(changes)
        return changed

    def group(self, names: Iterable[str]) -> dict[str, int]:
        """Return the current bytes of ``names`` in address order."""
        ordered = sorted(names, key=address_of)
        return {name: self.values[name] for name in ordered}

    def address_of(self, name: str) -> int:
        return address_of(name)

    def changed_from_reset(self) -> dict[str, int]:
        """Registers whose value differs from the power-on default."""
        return {
            name: value for name, value in self.values.items()
            if RESET_VALUES[name] != value
        }

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary keyed by register name."""
        return {
            name: {
                "address": f"0x{REGISTER_ADDRESSES[name]:02X}",
                "value": f"0x{value:02X}",
            }
            for name, value in self.group(self.values).items()
        }

    def __repr__(self) -> str:
        changed = ", ".join(
            f"{name}=0x{value:02X}" for name, value in self.changed_from_reset().items()
        )
        return f"RegisterMap({changed or 'reset'})"
