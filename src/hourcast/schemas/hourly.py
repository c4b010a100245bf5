"""Pandera schema for the normalized hourly forecast table."""

import pandera.pandas as pa
from pandera.typing import Series


class HourlyForecastSchema(pa.DataFrameModel):
    """
    Schema for the hourly forecast DataFrame.

    One row per hour, indexed by local timestamp, starting at local
    midnight today. Zero means either a zero forecast or no coverage.
    """

    temperature: Series[float] = pa.Field(description="Air temperature (°F)")
    dewpoint: Series[float] = pa.Field(description="Dew point (°F)")
    sky_cover: Series[float] = pa.Field(
        ge=0.0, le=100.0, description="Sky cover (%)"
    )
    probability_of_precipitation: Series[float] = pa.Field(
        ge=0.0, le=100.0, description="Probability of precipitation (%)"
    )
    wind_speed: Series[float] = pa.Field(ge=0.0, description="Wind speed (mph)")
    quantitative_precipitation: Series[float] = pa.Field(
        ge=0.0, description="Liquid precipitation amount (in)"
    )
    snowfall_amount: Series[float] = pa.Field(
        ge=0.0, description="Snowfall amount (in)"
    )

    class Config:
        """Schema configuration."""

        name = "HourlyForecastSchema"
        strict = False  # Allow extra columns
        coerce = True  # Coerce types where possible
