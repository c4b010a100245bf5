"""
Configuration management with typed Pydantic models.

Provides YAML loading with environment variable interpolation.
"""

from hourcast.config.loader import load_config
from hourcast.config.settings import (
    AppConfig,
    FetchConfig,
    LocationConfig,
    OutputConfig,
)

__all__ = [
    "AppConfig",
    "FetchConfig",
    "LocationConfig",
    "OutputConfig",
    "load_config",
]
