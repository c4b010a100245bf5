"""
Client for the National Weather Service API (api.weather.gov).

Forecasts are fetched in two steps:
1. ``/points/{lat},{lon}`` resolves the forecast office (gridId), the
   grid cell (gridX, gridY) and the IANA timezone of the location.
2. ``/gridpoints/{gridId}/{gridX},{gridY}`` returns the raw forecast
   layers for that cell.

NWS asks clients to identify themselves with a contact string in the
User-Agent header.
"""

import time
from dataclasses import dataclass
from typing import Any

import requests

from hourcast.config.settings import FetchConfig
from hourcast.errors import FetchError
from hourcast.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class GridLocation:
    """Forecast grid cell and timezone for a lat/lon."""

    grid_id: str
    grid_x: int
    grid_y: int
    timezone: str


class NWSClient:
    """Thin wrapper around requests for the two NWS endpoints we use."""

    def __init__(
        self,
        config: FetchConfig,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            config: Fetch configuration (contact string, base URL, timeout).
            session: Optional pre-built session (used by tests).
        """
        self.config = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": config.user_agent,
                "Accept": "application/geo+json",
            }
        )

    def _get_json(self, url: str) -> dict[str, Any]:
        """GET a URL and decode the JSON body."""
        log.debug("GET", url=url)
        started = time.perf_counter()
        try:
            response = self._session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            log.warning("GET failed", url=url, error=str(e))
            msg = f"Request to {url} failed: {e}"
            raise FetchError(msg) from e
        except ValueError as e:
            log.warning("GET returned invalid JSON", url=url)
            msg = f"Response from {url} is not valid JSON"
            raise FetchError(msg) from e

        elapsed_ms = (time.perf_counter() - started) * 1000
        log.debug("GET finished", url=url, elapsed_ms=round(elapsed_ms, 1))

        if not isinstance(data, dict):
            msg = f"Response from {url} is not a JSON object"
            raise FetchError(msg)
        return data

    def resolve_location(self, lat: float, lon: float) -> GridLocation:
        """
        Resolve a lat/lon to its forecast grid cell and timezone.

        Raises:
            FetchError: On transport errors or an incomplete response.
        """
        url = f"{self.config.base_url}/points/{lat:.4f},{lon:.4f}"
        data = self._get_json(url)

        properties = data.get("properties")
        if not isinstance(properties, dict):
            msg = f"Points response for {lat},{lon} has no properties"
            raise FetchError(msg)

        missing = [
            key
            for key in ("gridId", "gridX", "gridY", "timeZone")
            if properties.get(key) is None
        ]
        if missing:
            msg = f"Points response for {lat},{lon} lacks: {', '.join(missing)}"
            raise FetchError(msg)

        try:
            location = GridLocation(
                grid_id=str(properties["gridId"]),
                grid_x=int(properties["gridX"]),
                grid_y=int(properties["gridY"]),
                timezone=str(properties["timeZone"]),
            )
        except (TypeError, ValueError) as e:
            msg = f"Points response for {lat},{lon} has invalid grid coordinates"
            raise FetchError(msg) from e

        log.info(
            "Resolved grid location",
            grid_id=location.grid_id,
            grid_x=location.grid_x,
            grid_y=location.grid_y,
            timezone=location.timezone,
        )
        return location

    def fetch_gridpoint(self, location: GridLocation) -> dict[str, Any]:
        """
        Fetch the raw gridpoint forecast document.

        Raises:
            FetchError: On transport errors or a non-object body.
        """
        url = (
            f"{self.config.base_url}/gridpoints/"
            f"{location.grid_id}/{location.grid_x},{location.grid_y}"
        )
        return self._get_json(url)

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()
