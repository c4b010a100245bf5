"""
Hourcast: hourly normalization of NWS gridpoint forecasts.

This package turns the run-length-encoded forecast layers served by
the National Weather Service into a dense, timezone-aligned hourly
dataset suitable for charting.
"""

from importlib.metadata import version

__version__ = version("hourcast")

__all__ = ["__version__"]
