"""
Normalization layer for NWS forecast layers.

Decodes validity periods, aligns interval starts onto the hourly
window and converts values to the units used downstream.
"""

from hourcast.normalization.alignment import (
    SLOTS_PER_DAY,
    resolve_start_slot,
)
from hourcast.normalization.period import decode_period
from hourcast.normalization.units import Unit, convert_value

__all__ = [
    "SLOTS_PER_DAY",
    "Unit",
    "convert_value",
    "decode_period",
    "resolve_start_slot",
]
