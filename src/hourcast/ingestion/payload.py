"""
Parsing of NWS gridpoint JSON into forecast layers.

A gridpoint document looks like::

    {"properties": {
        "validTimes": "2024-05-10T04:00:00+00:00/P7DT21H",
        "temperature": {
            "uom": "wmoUnit:degC",
            "values": [{"validTime": "2024-05-10T04:00:00+00:00/PT2H", "value": 11.1}, ...]
        },
        ...
    }}

Values are kept raw here; numeric parsing happens during assembly so
that a bad value aborts the build with a precise error.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from hourcast.dataset.models import (
    ForecastElement,
    ForecastValue,
    Quantity,
    ValidTimeInterval,
)
from hourcast.errors import PayloadError
from hourcast.utils.logging import get_logger

log = get_logger(__name__)


class GridpointValue(BaseModel):
    """One ``{validTime, value}`` entry of a layer."""

    model_config = ConfigDict(extra="ignore")

    validTime: str  # noqa: N815
    value: Any = None


class GridpointLayer(BaseModel):
    """One forecast layer as served by NWS."""

    model_config = ConfigDict(extra="ignore")

    uom: str | None = None
    values: list[GridpointValue]


def parse_instant(text: str) -> datetime:
    """
    Parse an ISO-8601 instant; naive values are taken as UTC.

    Raises:
        PayloadError: If the text is not a valid timestamp.
    """
    candidate = text.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        instant = datetime.fromisoformat(candidate)
    except ValueError as e:
        msg = f"Invalid timestamp {text!r}"
        raise PayloadError(msg) from e
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def parse_valid_time(valid_time: str) -> ValidTimeInterval:
    """
    Split ``<start>/<duration>`` into a ValidTimeInterval.

    The duration is left encoded; see normalization.period.decode_period.
    """
    start_text, sep, duration = valid_time.partition("/")
    if not sep or not duration:
        msg = f"validTime {valid_time!r} lacks a '/<duration>' part"
        raise PayloadError(msg)
    return ValidTimeInterval(start=parse_instant(start_text), duration=duration.strip())


def _properties(raw: Any) -> dict[str, Any]:
    """Return the ``properties`` object of a gridpoint document."""
    if not isinstance(raw, dict) or not isinstance(raw.get("properties"), dict):
        msg = "Gridpoint payload has no 'properties' object"
        raise PayloadError(msg)
    properties: dict[str, Any] = raw["properties"]
    return properties


def parse_element(quantity: Quantity, raw_layer: Any) -> ForecastElement:
    """
    Parse one layer into a ForecastElement.

    Raises:
        PayloadError: If the layer is not an object with a ``values`` list,
            or a validTime cannot be split.
    """
    try:
        layer = GridpointLayer.model_validate(raw_layer)
    except ValidationError as e:
        msg = f"Element {quantity.value} is malformed: {e.error_count()} error(s)"
        raise PayloadError(msg) from e

    values = tuple(
        ForecastValue(value=entry.value, interval=parse_valid_time(entry.validTime))
        for entry in layer.values
    )
    return ForecastElement(quantity=quantity, uom=layer.uom, values=values)


def parse_gridpoint_payload(raw: Any) -> dict[Quantity, ForecastElement]:
    """
    Parse every tracked quantity present in a gridpoint document.

    Absent quantities are simply not in the result; the assembler
    decides that a missing quantity is fatal.

    Args:
        raw: Decoded JSON document.

    Returns:
        Mapping of quantity to parsed layer.
    """
    properties = _properties(raw)
    elements: dict[Quantity, ForecastElement] = {}

    for quantity in Quantity:
        raw_layer = properties.get(quantity.value)
        if raw_layer is None:
            continue
        elements[quantity] = parse_element(quantity, raw_layer)

    log.debug(
        "Parsed gridpoint payload",
        elements=[q.value for q in elements],
        values=sum(len(e.values) for e in elements.values()),
    )
    return elements


def parse_observation_start(raw: Any) -> datetime | None:
    """Start of the document's ``validTimes`` range, if present."""
    valid_times = _properties(raw).get("validTimes")
    if not isinstance(valid_times, str) or not valid_times:
        return None
    return parse_instant(valid_times.split("/")[0])
