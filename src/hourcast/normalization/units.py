"""
Unit conversion for NWS forecast values.

NWS reports SI units tagged with WMO codes; the dataset carries
Fahrenheit, miles per hour and inches. Unknown tags pass through.
"""

from collections.abc import Callable
from enum import Enum

KM_PER_MILE = 1.60934
INCHES_PER_MM = 0.0393701


class Unit(str, Enum):
    """Unit-of-measure tags that are converted."""

    CELSIUS = "wmoUnit:degC"
    KM_PER_HOUR = "wmoUnit:km_h-1"
    MILLIMETER = "wmoUnit:mm"


_CONVERTERS: dict[str, Callable[[float], float]] = {
    Unit.CELSIUS.value: lambda v: v * 9 / 5 + 32,
    Unit.KM_PER_HOUR.value: lambda v: v / KM_PER_MILE,
    Unit.MILLIMETER.value: lambda v: v * INCHES_PER_MM,
}


def convert_value(value: float, uom: str | None) -> float:
    """
    Convert a raw value according to its unit tag.

    Args:
        value: Raw numeric value.
        uom: Unit tag such as ``wmoUnit:degC``; None or unknown tags
            (``wmoUnit:percent``) leave the value unchanged.

    Returns:
        Converted value.
    """
    if uom is None:
        return value
    converter = _CONVERTERS.get(uom)
    if converter is None:
        return value
    return converter(value)
