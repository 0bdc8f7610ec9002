"""Data models for the register map and decoded radio settings."""

from .registers import REGISTER_ADDRESSES, RESET_VALUES, RegisterMap
from .radio import RadioSettings
