"""Radio session: owns the register map and applies user edits.

Every edit runs in the same order: validate the input, encode it,
write the field group to the register map in one update, and then (if a
dispatcher is attached) send one WRITE_REGISTER frame per register of
the group. A failure before the map update leaves the map untouched.
"""

from __future__ import annotations

import logging
from typing import Mapping

from .codecs.fields import (
    MODULATION_FORMATS,
    TX_POWER_TABLE,
    decode_modulation,
    encode_manchester,
    encode_modulation,
    encode_phase_transition,
    encode_tx_power,
    encode_whitening,
)
from .codecs.quantities import apply_data_rate, encode_deviation, encode_frequency
from .dispatcher import CommandDispatcher
from .errors import InvalidInput, TransportError
from .models.radio import RadioSettings
from .models.registers import REGISTER_ADDRESSES, RegisterMap, address_of
from .protocol.commands import Action
from .validation import parse_channel, parse_quantity

logger = logging.getLogger(__name__)


class RadioSession:
    """Register state plus an optional link to the device.

    Without a dispatcher the session works offline: edits only update
    the register map.
    """

    def __init__(
        self,
        registers: RegisterMap | None = None,
        dispatcher: CommandDispatcher | None = None,
    ) -> None:
        self._registers = registers if registers is not None else RegisterMap()
        self._dispatcher = dispatcher

    @property
    def registers(self) -> RegisterMap:
        return self._registers

    @property
    def dispatcher(self) -> CommandDispatcher | None:
        return self._dispatcher

    @property
    def online(self) -> bool:
        return self._dispatcher is not None

    def attach(self, dispatcher: CommandDispatcher) -> None:
        self._dispatcher = dispatcher

    def detach(self) -> None:
        self._dispatcher = None

    def settings(self) -> RadioSettings:
        return RadioSettings.from_registers(self._registers)

    # --- physical quantities ----------------------------------------------

    def set_frequency(self, text: str | float) -> dict[str, int]:
        """Set the carrier frequency from MHz text, e.g. ``"2464.0"``."""
        freq_mhz = parse_quantity("frequency", text)
        freq2, freq1, freq0 = encode_frequency(freq_mhz)
        return self._commit({"FREQ2": freq2, "FREQ1": freq1, "FREQ0": freq0})

    def set_deviation(self, text: str | float) -> dict[str, int]:
        """Set the FSK frequency deviation from kHz text."""
        deviation_khz = parse_quantity("deviation", text)
        return self._commit({"DEVIATN": encode_deviation(deviation_khz)})

    def set_data_rate(self, text: str | float) -> dict[str, int]:
        """Set the symbol rate from kBaud text."""
        rate_kbaud = parse_quantity("data_rate", text)
        mdmcfg4, mdmcfg3 = apply_data_rate(self._registers["MDMCFG4"], rate_kbaud)
        return self._commit({"MDMCFG4": mdmcfg4, "MDMCFG3": mdmcfg3})

    # --- bit fields --------------------------------------------------------

    def set_modulation(self, scheme: str) -> dict[str, int]:
        """Select 2-FSK, GFSK or MSK."""
        if scheme not in MODULATION_FORMATS:
            raise InvalidInput(
                "modulation",
                f"unknown scheme {scheme!r}. Valid: {list(MODULATION_FORMATS)}",
            )
        return self._commit({"MDMCFG2": encode_modulation(self._registers["MDMCFG2"], scheme)})

    def set_channel(self, text: str | int) -> dict[str, int]:
        return self._commit({"CHANNR": parse_channel(text)})

    def set_tx_power(self, dbm: int) -> dict[str, int]:
        """Select an output power level from the PATABLE lookup."""
        if dbm not in TX_POWER_TABLE:
            raise InvalidInput(
                "tx_power",
                f"{dbm} dBm is not a supported level. Valid: {sorted(TX_POWER_TABLE, reverse=True)}",
            )
        return self._commit({"PA_TABLE0": encode_tx_power(self._registers["PA_TABLE0"], dbm)})

    def set_whitening(self, enabled: bool) -> dict[str, int]:
        return self._commit({"PKTCTRL0": encode_whitening(self._registers["PKTCTRL0"], enabled)})

    def set_manchester(self, enabled: bool) -> dict[str, int]:
        return self._commit({"MDMCFG2": encode_manchester(self._registers["MDMCFG2"], enabled)})

    def set_phase_transition_time(self, eighths: int) -> dict[str, int]:
        """Set the MSK phase transition time in eighths of a symbol (0-7).

        Only accepted while MSK is selected; in the other modes the same
        bits hold the deviation mantissa.
        """
        if decode_modulation(self._registers["MDMCFG2"]) != "MSK":
            raise InvalidInput(
                "phase_transition_time", "only applies when MSK modulation is selected"
            )
        if isinstance(eighths, bool) or not isinstance(eighths, int) or not 0 <= eighths <= 7:
            raise InvalidInput(
                "phase_transition_time", f"must be an integer 0-7, got {eighths!r}", (0, 7)
            )
        return self._commit(
            {"DEVIATN": encode_phase_transition(self._registers["DEVIATN"], eighths)}
        )

    # --- raw register access -----------------------------------------------

    def write_register(self, name: str, value: int) -> dict[str, int]:
        """Write a raw byte to a named register."""
        return self._commit({name: value})

    def read_register(self, name: str) -> int:
        """Request a register read from the device and return the local value.

        Replies are not parsed; the returned value is the locally held one.
        """
        address = address_of(name)
        if self._dispatcher is not None:
            self._dispatcher.read_register(address)
        return self._registers[name]

    def perform_action(self, name: str) -> Action:
        """Send a command strobe by name, e.g. ``"SIDLE"``."""
        try:
            action = Action[name.upper()]
        except KeyError:
            raise InvalidInput(
                "action", f"unknown action {name!r}. Valid: {[a.name for a in Action]}"
            ) from None
        self._require_dispatcher().perform_action(action)
        return action

    def ping(self) -> None:
        self._require_dispatcher().ping()

    def sync(self) -> int:
        """Write every register to the device in address order.

        Returns:
            Number of frames sent.
        """
        dispatcher = self._require_dispatcher()
        for name, value in self._registers.group(REGISTER_ADDRESSES).items():
            dispatcher.write_register(address_of(name), value)
        return len(REGISTER_ADDRESSES)

    # --- internals -----------------------------------------------------------

    def _require_dispatcher(self) -> CommandDispatcher:
        if self._dispatcher is None:
            raise TransportError("Not connected to device")
        return self._dispatcher

    def _commit(self, changes: Mapping[str, int]) -> dict[str, int]:
        changed = self._registers.update(changes)
        group = self._registers.group(changes)
        if not changed:
            logger.debug("No register change for %s", list(group))

        if self._dispatcher is not None:
            for name, value in group.items():
                self._dispatcher.write_register(address_of(name), value)
        return group
