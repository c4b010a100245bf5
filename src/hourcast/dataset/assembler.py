"""
Assembly of forecast layers into the hourly dataset.

Each layer is run-length encoded: a value holds for its interval's
duration. Layers are written into a fresh 145-slot window starting at
their own aligned slot, then the window is trimmed to the 121 slots
from local midnight today onward.

Any structural problem aborts the whole build. Zeros in the result
mean "forecast zero" or "before the layer's coverage", never
"failed to parse".
"""

import math
from collections.abc import Mapping
from datetime import datetime

from hourcast.dataset.models import (
    VISIBLE_START,
    WINDOW_SLOTS,
    DataPoint,
    ForecastElement,
    Quantity,
    WeatherDataset,
)
from hourcast.errors import MissingQuantityError, PeriodDecodeError, ValueDecodeError
from hourcast.normalization.alignment import local_midnight, resolve_start_slot
from hourcast.normalization.period import decode_period
from hourcast.normalization.units import convert_value
from hourcast.utils.logging import get_logger

log = get_logger(__name__)


def _parse_value(raw: object, quantity: Quantity) -> float:
    """Parse a raw payload value as float."""
    if isinstance(raw, bool) or raw is None:
        msg = f"Element {quantity.value}: non-numeric value {raw!r}"
        raise ValueDecodeError(msg)
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        msg = f"Element {quantity.value}: non-numeric value {raw!r}"
        raise ValueDecodeError(msg) from e

    # float() accepts "NaN" and "inf"
    if not math.isfinite(value):
        msg = f"Element {quantity.value}: non-numeric value {raw!r}"
        raise ValueDecodeError(msg)
    return value


def _fill_element(
    window: list[DataPoint],
    element: ForecastElement,
    tz_name: str,
    now: datetime,
) -> int:
    """
    Write one layer into the window.

    Returns:
        Number of slots written.
    """
    if not element.values:
        log.debug("Element has no values", element=element.quantity.value)
        return 0

    index = resolve_start_slot(element.values[0].interval.start, tz_name, now)
    start_slot = index
    written = 0

    for forecast_value in element.values:
        if index >= WINDOW_SLOTS:
            break

        periods = decode_period(forecast_value.interval.duration)
        if periods <= 0:
            msg = (
                f"Element {element.quantity.value}: non-positive period "
                f"{forecast_value.interval.duration!r}"
            )
            raise PeriodDecodeError(msg)

        value = convert_value(
            _parse_value(forecast_value.value, element.quantity), element.uom
        )

        end = min(index + periods, WINDOW_SLOTS)
        for slot in range(index, end):
            window[slot] = window[slot].with_value(element.quantity, value)
        written += end - index
        index = end

    log.debug(
        "Processed element",
        element=element.quantity.value,
        uom=element.uom,
        start_slot=start_slot,
        slots_written=written,
    )
    return written


def assemble_dataset(
    elements: Mapping[Quantity, ForecastElement],
    tz_name: str,
    now: datetime,
) -> WeatherDataset:
    """
    Merge forecast layers into a 121-point hourly dataset.

    Args:
        elements: Parsed layers keyed by quantity; every Quantity is required.
        tz_name: IANA timezone of the forecast location.
        now: Reference instant that defines local "today".

    Returns:
        WeatherDataset starting at local midnight today.

    Raises:
        MissingQuantityError: If a quantity is absent.
        AlignmentError: If a layer cannot be placed on the window.
        PeriodDecodeError: If a duration is malformed or non-positive.
        ValueDecodeError: If a value is not numeric.
    """
    for quantity in Quantity:
        if quantity not in elements:
            log.warning("Element not found in payload", element=quantity.value)
            raise MissingQuantityError(quantity.value)

    window = [DataPoint() for _ in range(WINDOW_SLOTS)]

    for quantity in Quantity:
        _fill_element(window, elements[quantity], tz_name, now)

    dataset = WeatherDataset(
        data_points=tuple(window[VISIBLE_START:]),
        timezone=tz_name,
        start_time=local_midnight(now, tz_name),
    )
    log.info(
        "Assembled dataset",
        timezone=tz_name,
        start_time=dataset.start_time.isoformat(),
        points=len(dataset),
    )
    return dataset
