"""
structlog setup for hourcast.

Every event goes to stderr; stdout is reserved for the tables and CSV
written by the CLI. Pipeline events carry the location name bound by
log_context, so a multi-location ``hourcast fetch`` run can be filtered
per location in JSON mode.
"""

import logging
import sys
from typing import Any

import structlog


def _renderer(json_output: bool) -> list[structlog.types.Processor]:
    """Final processors: one JSON object per line, or the console renderer."""
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure logging for an hourcast command.

    Called from the CLI callback before any command runs.

    Args:
        level: Threshold name; unknown names fall back to INFO.
            WARNING shows only failed locations and alignment anomalies,
            DEBUG adds per-element slot counts from the assembler.
        json_output: Emit one JSON object per event (for cron runs).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # requests/urllib3 log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Module logger; hourcast modules call ``log = get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind keys to every event logged inside the block.

    build_forecast wraps each location this way, so the NWS request
    timings and assembler messages all carry the location name::

        with log_context(location="onset"):
            log.info("Fetched gridpoint", fetch_ms=412.0)
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
