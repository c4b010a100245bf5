"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
"""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://api.weather.gov"


class LocationConfig(BaseModel):
    """A forecast location."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Short identifier, used for output file names")
    lat: float = Field(ge=-90.0, le=90.0, description="Latitude in WGS84")
    lon: float = Field(ge=-180.0, le=180.0, description="Longitude in WGS84")
    title: str | None = Field(default=None, description="Human-readable title")
    days: int = Field(default=5, ge=1, le=5, description="Days to export (1-5)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is usable as a file name."""
        if not re.fullmatch(r"[A-Za-z0-9_.-]+", v):
            msg = f"Location name must match [A-Za-z0-9_.-]+, got: {v!r}"
            raise ValueError(msg)
        return v

    @property
    def hours_to_show(self) -> int:
        """Hours covered by `days`, including the closing midnight."""
        return self.days * 24 + 1

    @property
    def display_title(self) -> str:
        """Title, falling back to the name."""
        return self.title or f"Forecast for {self.name}"


class FetchConfig(BaseModel):
    """NWS API access configuration."""

    model_config = ConfigDict(frozen=True)

    user_agent: str = Field(
        description="Contact string (e-mail address) sent as User-Agent, required by NWS"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="NWS API root URL")
    timeout: float = Field(
        default=20.0, ge=1.0, le=120.0, description="Request timeout in seconds"
    )

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Ensure a contact string is set."""
        if not v.strip():
            msg = "user_agent must not be empty (NWS requires a contact string)"
            raise ValueError(msg)
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return v.rstrip("/")


class OutputConfig(BaseModel):
    """Output paths configuration."""

    model_config = ConfigDict(frozen=True)

    output_root: Path = Field(
        default=Path("./output"), description="Directory for exported CSV files"
    )

    def csv_path(self, location: LocationConfig) -> Path:
        """CSV path for a location."""
        return self.output_root / f"{location.name}.csv"


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    fetch: FetchConfig
    locations: list[LocationConfig] = Field(min_length=1)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("locations")
    @classmethod
    def validate_unique_names(cls, v: list[LocationConfig]) -> list[LocationConfig]:
        """Ensure location names are unique."""
        names = [loc.name for loc in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Duplicate location names: {', '.join(duplicates)}"
            raise ValueError(msg)
        return v

    def get_location(self, name: str) -> LocationConfig:
        """Look up a location by name."""
        for location in self.locations:
            if location.name == name:
                return location
        msg = f"Location {name!r} is not configured"
        raise ValueError(msg)
