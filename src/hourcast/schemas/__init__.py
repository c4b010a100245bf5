"""
Schema definitions using Pandera for data validation.

The hourly export handed to rendering consumers is validated here.
"""

from hourcast.schemas.hourly import HourlyForecastSchema

__all__ = ["HourlyForecastSchema"]
