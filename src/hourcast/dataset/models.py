"""
Value model for forecast layers and the normalized hourly dataset.

Window layout (145 hourly slots):
    slot 0    local midnight yesterday
    slot 24   local midnight today
    slot 144  local midnight six days out

The caller-visible WeatherDataset is slots 24..144 (121 points).
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import pandas as pd

WINDOW_SLOTS = 145
VISIBLE_START = 24
DATASET_SLOTS = WINDOW_SLOTS - VISIBLE_START


class Quantity(str, Enum):
    """Forecast quantities tracked per hour, valued by NWS property name."""

    TEMPERATURE = "temperature"
    DEWPOINT = "dewpoint"
    SKY_COVER = "skyCover"
    PROBABILITY_OF_PRECIPITATION = "probabilityOfPrecipitation"
    WIND_SPEED = "windSpeed"
    QUANTITATIVE_PRECIPITATION = "quantitativePrecipitation"
    SNOWFALL_AMOUNT = "snowfallAmount"

    @property
    def field_name(self) -> str:
        """DataPoint attribute holding this quantity."""
        return _FIELD_BY_QUANTITY[self]


_FIELD_BY_QUANTITY: dict[Quantity, str] = {
    Quantity.TEMPERATURE: "temperature",
    Quantity.DEWPOINT: "dewpoint",
    Quantity.SKY_COVER: "sky_cover",
    Quantity.PROBABILITY_OF_PRECIPITATION: "probability_of_precipitation",
    Quantity.WIND_SPEED: "wind_speed",
    Quantity.QUANTITATIVE_PRECIPITATION: "quantitative_precipitation",
    Quantity.SNOWFALL_AMOUNT: "snowfall_amount",
}


@dataclass(frozen=True)
class DataPoint:
    """
    One hourly record of normalized values.

    Units: temperature and dewpoint in °F, wind speed in mph,
    precipitation and snowfall in inches, sky cover and
    probability of precipitation in percent.
    """

    temperature: float = 0.0
    dewpoint: float = 0.0
    sky_cover: float = 0.0
    probability_of_precipitation: float = 0.0
    wind_speed: float = 0.0
    quantitative_precipitation: float = 0.0
    snowfall_amount: float = 0.0

    def get(self, quantity: Quantity) -> float:
        """Read the value for a quantity."""
        value: float = getattr(self, quantity.field_name)
        return value

    def with_value(self, quantity: Quantity, value: float) -> "DataPoint":
        """Copy of this point with one quantity replaced."""
        return replace(self, **{quantity.field_name: value})

    def as_dict(self) -> dict[str, float]:
        """Field name to value mapping."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ValidTimeInterval:
    """Start instant plus ISO-8601 duration, e.g. ``2024-05-10T04:00:00+00:00/PT2H``."""

    start: datetime
    duration: str


@dataclass(frozen=True)
class ForecastValue:
    """A raw value and the interval it is valid for."""

    value: Any
    interval: ValidTimeInterval


@dataclass(frozen=True)
class ForecastElement:
    """One forecast layer: a quantity, its unit tag and its values in source order."""

    quantity: Quantity
    uom: str | None
    values: tuple[ForecastValue, ...] = ()


@dataclass(frozen=True)
class WeatherDataset:
    """
    Normalized hourly forecast returned to callers.

    Attributes:
        data_points: Exactly 121 hourly points; index 0 is local midnight today.
        timezone: IANA timezone identifier of the location.
        start_time: Local midnight today (timestamp of data_points[0]).
    """

    data_points: tuple[DataPoint, ...]
    timezone: str
    start_time: datetime

    def __len__(self) -> int:
        return len(self.data_points)

    def series(self, quantity: Quantity) -> list[float]:
        """All hourly values for one quantity."""
        return [point.get(quantity) for point in self.data_points]

    def to_frame(self, hours: int | None = None) -> "pd.DataFrame":
        """
        Convert to a DataFrame indexed by local hourly timestamps.

        Args:
            hours: Optional number of leading hours to keep.

        Returns:
            DataFrame validated against HourlyForecastSchema.
        """
        import pandas as pd

        from hourcast.schemas.hourly import HourlyForecastSchema

        index = pd.date_range(
            start=pd.Timestamp(self.start_time),
            periods=len(self.data_points),
            freq="h",
            name="time",
        )
        df = pd.DataFrame(
            [point.as_dict() for point in self.data_points],
            index=index,
            dtype=float,
        )
        if hours is not None:
            df = df.iloc[:hours]
        return HourlyForecastSchema.validate(df)
