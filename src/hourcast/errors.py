"""
Exception hierarchy for forecast retrieval and normalization.

Every failure that aborts a dataset build derives from ForecastError,
so callers can treat "no dataset" uniformly while still telling the
causes apart.
"""


class ForecastError(Exception):
    """Base class for all failures that prevent a dataset from being built."""


class InputError(ForecastError, ValueError):
    """Caller supplied invalid input (coordinates, contact string)."""


class PayloadError(ForecastError, ValueError):
    """Forecast payload is structurally malformed."""


class MissingQuantityError(PayloadError):
    """A required forecast quantity is absent from the payload."""

    def __init__(self, quantity: str) -> None:
        self.quantity = quantity
        super().__init__(f"Quantity '{quantity}' not found in payload")


class PeriodDecodeError(ForecastError, ValueError):
    """A validity duration string could not be decoded into hours."""


class ValueDecodeError(ForecastError, ValueError):
    """A forecast value is not numeric."""


class AlignmentError(ForecastError):
    """An interval start could not be mapped onto the hourly window."""


class FetchError(ForecastError):
    """Retrieval from the forecast service failed."""
