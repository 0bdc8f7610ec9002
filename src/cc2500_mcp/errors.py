"""Exception taxonomy.

Nothing raised here is fatal to the process; the worst outcome of any
failure is that no frame was sent.
"""

from __future__ import annotations


class CC2500Error(Exception):
    """Base class for all errors raised by this package."""


class InvalidInput(CC2500Error, ValueError):
    """User input was unparsable or outside the quantity's valid range.

    The register map is never modified when this is raised.
    """

    def __init__(
        self,
        quantity: str,
        reason: str,
        bounds: tuple[float, float] | None = None,
    ) -> None:
        self.quantity = quantity
        self.reason = reason
        self.bounds = bounds
        super().__init__(f"Invalid {quantity}: {reason}")

    def to_dict(self) -> dict:
        result = {"error": str(self), "quantity": self.quantity}
        if self.bounds is not None:
            result["min"], result["max"] = self.bounds
        return result


class EncodingOverflow(InvalidInput):
    """A computed register field does not fit its bit width."""


class SerializationError(CC2500Error, ValueError):
    """A packet or payload could not be serialized; no frame was sent."""


class TransportError(CC2500Error, ConnectionError):
    """Writing to the serial transport failed or the port is not open."""
