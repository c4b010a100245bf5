"""
Forecast pipeline: resolve, fetch, parse and assemble.

Network access happens entirely before normalization; a failed fetch
means the assembler is never invoked.
"""

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from hourcast.config.settings import FetchConfig, LocationConfig
from hourcast.dataset.assembler import assemble_dataset
from hourcast.dataset.models import WeatherDataset
from hourcast.errors import ForecastError, InputError, PayloadError
from hourcast.ingestion.nws import GridLocation, NWSClient
from hourcast.ingestion.payload import parse_gridpoint_payload, parse_observation_start
from hourcast.normalization.alignment import get_zone
from hourcast.utils.logging import get_logger, log_context

log = get_logger(__name__)


@dataclass
class ForecastResult:
    """
    Result of building one location's forecast.

    Attributes:
        location: Location configuration the forecast was built for.
        grid: Resolved NWS grid cell and timezone.
        dataset: Normalized 121-point hourly dataset.
        observation_start: Start of the payload's validTimes range, if given.
        fetch_ms: Wall time spent on both NWS requests.
    """

    location: LocationConfig
    grid: GridLocation
    dataset: WeatherDataset
    observation_start: datetime | None = None
    fetch_ms: float = 0.0


def normalize_payload(
    raw: Any,
    tz_name: str,
    now: datetime | None = None,
) -> WeatherDataset:
    """
    Parse a gridpoint document and assemble the hourly dataset.

    Args:
        raw: Decoded gridpoint JSON.
        tz_name: IANA timezone of the location.
        now: Reference instant for "today"; defaults to the current time.

    Returns:
        Normalized WeatherDataset.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elements = parse_gridpoint_payload(raw)
    return assemble_dataset(elements, tz_name, now)


def _observation_start(raw: Any, tz_name: str) -> datetime | None:
    """
    Start of the payload's validTimes range, or None.

    The value is informational only, so a malformed validTimes is
    logged and skipped rather than failing the build.
    """
    try:
        observation_start = parse_observation_start(raw)
    except PayloadError as e:
        log.warning("Skipping malformed validTimes", error=str(e))
        return None

    if observation_start is not None:
        local_start = observation_start.astimezone(get_zone(tz_name))
        log.debug("Observation start", local=local_start.isoformat())
    return observation_start


def _validate_location(location: LocationConfig) -> None:
    """Reject coordinates that cannot be sent to the API."""
    for label, value, bound in (("lat", location.lat, 90.0), ("lon", location.lon, 180.0)):
        if not math.isfinite(value) or abs(value) > bound:
            msg = f"Invalid {label} for {location.name}: {value}"
            raise InputError(msg)


def build_forecast(
    location: LocationConfig,
    fetch: FetchConfig,
    now: datetime | None = None,
    client: NWSClient | None = None,
) -> ForecastResult:
    """
    Build the hourly forecast for one location.

    Args:
        location: Location to forecast.
        fetch: NWS access configuration.
        now: Reference instant for "today"; defaults to the current time.
        client: Optional client (a new one is created otherwise).

    Returns:
        ForecastResult with the normalized dataset.

    Raises:
        ForecastError: If any step fails; no partial dataset is returned.
    """
    _validate_location(location)
    if now is None:
        now = datetime.now(timezone.utc)

    owns_client = client is None
    nws = client or NWSClient(fetch)

    with log_context(location=location.name):
        try:
            started = time.perf_counter()
            grid = nws.resolve_location(location.lat, location.lon)
            raw = nws.fetch_gridpoint(grid)
            fetch_ms = (time.perf_counter() - started) * 1000
            log.info("Fetched gridpoint", fetch_ms=round(fetch_ms, 1))

            observation_start = _observation_start(raw, grid.timezone)
            dataset = normalize_payload(raw, grid.timezone, now)
        except ForecastError as e:
            log.warning("Forecast build failed", error=str(e), kind=type(e).__name__)
            raise
        finally:
            if owns_client:
                nws.close()

    return ForecastResult(
        location=location,
        grid=grid,
        dataset=dataset,
        observation_start=observation_start,
        fetch_ms=fetch_ms,
    )
