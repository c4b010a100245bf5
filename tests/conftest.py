"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

# 14:00 EDT on 2024-05-10; local midnight today is 04:00 UTC
NOW = datetime(2024, 5, 10, 18, 0, tzinfo=timezone.utc)
TZ = "America/New_York"


def make_layer(uom: str | None, entries: list[tuple[Any, str, str]]) -> dict[str, Any]:
    """Build an NWS layer from (value, start, duration) tuples."""
    layer: dict[str, Any] = {
        "values": [
            {"validTime": f"{start}/{duration}", "value": value}
            for value, start, duration in entries
        ]
    }
    if uom is not None:
        layer["uom"] = uom
    return layer


def repeat(value: Any, start: str, duration: str, count: int) -> list[tuple[Any, str, str]]:
    """
    Repeat one value `count` times.

    Only the first entry's start matters for alignment; later starts
    are carried along for realism but not used.
    """
    return [(value, start, duration)] * count


def empty_payload() -> dict[str, Any]:
    """Gridpoint payload with every tracked layer present but empty."""
    names = [
        "temperature",
        "dewpoint",
        "skyCover",
        "probabilityOfPrecipitation",
        "windSpeed",
        "quantitativePrecipitation",
        "snowfallAmount",
    ]
    return {
        "properties": {
            "validTimes": "2024-05-10T04:00:00+00:00/P7DT20H",
            **{name: make_layer("wmoUnit:percent", []) for name in names},
        }
    }


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant."""
    return NOW


@pytest.fixture
def gridpoint_payload() -> dict[str, Any]:
    """
    Realistic gridpoint payload for America/New_York at NOW.

    Layers start at different local hours and days, use different
    period lengths, and several overrun the window end.
    """
    return {
        "properties": {
            "validTimes": "2024-05-09T22:00:00+00:00/P7DT2H",
            # yesterday 18:00 EDT -> slot 18; 10 °C = 50 °F
            "temperature": make_layer(
                "wmoUnit:degC", repeat(10.0, "2024-05-09T22:00:00+00:00", "PT1H", 200)
            ),
            # today 00:00 -> slot 24; 0 °C = 32 °F
            "dewpoint": make_layer(
                "wmoUnit:degC", repeat("0", "2024-05-10T04:00:00+00:00", "PT6H", 21)
            ),
            # today 06:00 -> slot 30
            "skyCover": make_layer(
                "wmoUnit:percent", repeat(50, "2024-05-10T10:00:00+00:00", "P1D", 5)
            ),
            "probabilityOfPrecipitation": make_layer(
                "wmoUnit:percent",
                repeat(40, "2024-05-10T04:00:00+00:00", "P1DT2H", 5),
            ),
            # yesterday 00:00 -> slot 0; 16.0934 km/h = 10 mph
            "windSpeed": make_layer(
                "wmoUnit:km_h-1",
                repeat(16.0934, "2024-05-09T04:00:00+00:00", "PT12H", 13),
            ),
            # 2.54 mm = 0.1 in
            "quantitativePrecipitation": make_layer(
                "wmoUnit:mm", repeat(2.54, "2024-05-10T04:00:00+00:00", "PT6H", 24)
            ),
            "snowfallAmount": make_layer(
                "wmoUnit:mm", [(0, "2024-05-10T04:00:00Z", "P6D")]
            ),
        }
    }


@pytest.fixture
def config_dict() -> dict[str, Any]:
    """Minimal configuration dictionary for testing."""
    return {
        "fetch": {"user_agent": "tester@example.com"},
        "locations": [
            {
                "name": "onset",
                "lat": 41.75,
                "lon": -70.644,
                "title": "Forecast for Onset, MA",
            }
        ],
    }
