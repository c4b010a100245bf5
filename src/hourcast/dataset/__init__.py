"""Hourly dataset value model and assembly."""

from hourcast.dataset.assembler import assemble_dataset
from hourcast.dataset.models import (
    DATASET_SLOTS,
    WINDOW_SLOTS,
    DataPoint,
    ForecastElement,
    ForecastValue,
    Quantity,
    ValidTimeInterval,
    WeatherDataset,
)

__all__ = [
    "DATASET_SLOTS",
    "WINDOW_SLOTS",
    "DataPoint",
    "ForecastElement",
    "ForecastValue",
    "Quantity",
    "ValidTimeInterval",
    "WeatherDataset",
    "assemble_dataset",
]
