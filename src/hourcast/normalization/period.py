"""
Decoding of ISO-8601 style validity durations.

NWS layers describe each value's validity as ``<start>/<duration>``,
where the duration uses a subset of ISO-8601: ``P[<n>D][T[<n>H]]``.
Examples: ``PT1H``, ``PT13H``, ``P1D``, ``P2DT3H``.
"""

import re

from hourcast.errors import PeriodDecodeError

HOURS_PER_DAY = 24

# ASCII digits only; int() also accepts "1_0" and non-Latin digits
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_component(text: str, suffix: str, duration: str) -> int:
    """Parse one ``<int><suffix>`` component; empty text counts as zero."""
    if not text:
        return 0

    if not text.endswith(suffix):
        msg = f"Invalid duration component {text!r} in {duration!r}"
        raise PeriodDecodeError(msg)

    number = text[: -len(suffix)]
    if not _INTEGER.fullmatch(number):
        msg = f"Invalid duration component {text!r} in {duration!r}"
        raise PeriodDecodeError(msg)
    return int(number)


def decode_period(duration: str) -> int:
    """
    Decode a duration string into a whole number of hours.

    Args:
        duration: Duration such as ``PT2H``, ``P1D`` or ``P1DT6H``.

    Returns:
        Total hours (days * 24 + hours). No range check is applied.

    Raises:
        PeriodDecodeError: If the string does not start with ``P``,
            a component is malformed, or both components are empty.
    """
    if not duration.startswith("P"):
        msg = f"Duration must start with 'P', got {duration!r}"
        raise PeriodDecodeError(msg)

    body = duration[1:]
    day_part, _, hour_part = body.partition("T")

    if not day_part and not hour_part:
        msg = f"Duration has neither days nor hours: {duration!r}"
        raise PeriodDecodeError(msg)

    days = _parse_component(day_part, "D", duration)
    hours = _parse_component(hour_part, "H", duration)

    return days * HOURS_PER_DAY + hours
