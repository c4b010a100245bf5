"""
Alignment of interval start instants onto the hourly window.

The window starts at local midnight *yesterday*, so every forecast
layer must be placed relative to the location's calendar, not UTC.
Each layer resolves its own start slot: NWS layers begin at different
hours, and sometimes on different local days.
"""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hourcast.errors import AlignmentError
from hourcast.utils.logging import get_logger

log = get_logger(__name__)

SLOTS_PER_DAY = 24


def get_zone(tz_name: str) -> ZoneInfo:
    """
    Look up an IANA timezone.

    Raises:
        AlignmentError: If the identifier is unknown.
    """
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        msg = f"Unknown timezone {tz_name!r}"
        raise AlignmentError(msg) from e


def _as_utc(instant: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def local_today(now: datetime, tz_name: str) -> date:
    """Calendar date of ``now`` at the given timezone."""
    return _as_utc(now).astimezone(get_zone(tz_name)).date()


def local_midnight(now: datetime, tz_name: str) -> datetime:
    """Local midnight at the start of today for the given timezone."""
    zone = get_zone(tz_name)
    return datetime.combine(local_today(now, tz_name), time(0), tzinfo=zone)


def resolve_start_slot(start: datetime, tz_name: str, now: datetime) -> int:
    """
    Map an interval's start instant to its first window slot.

    Slots 0-23 hold local yesterday, slots 24 onward hold local today
    and the following days.

    Args:
        start: Interval start (UTC, or any aware datetime).
        tz_name: IANA timezone of the forecast location.
        now: Reference instant that defines "today".

    Returns:
        Slot index of the interval's first hour.

    Raises:
        AlignmentError: If the timezone is unknown or the start falls
            after local today.
    """
    zone = get_zone(tz_name)
    local_start = _as_utc(start).astimezone(zone)
    today = local_today(now, tz_name)
    start_date = local_start.date()

    if start_date < today:
        return local_start.hour

    if start_date == today:
        return local_start.hour + SLOTS_PER_DAY

    # Never observed in NWS data; refuse to guess an offset
    log.warning(
        "Interval starts after local today",
        start=local_start.isoformat(),
        today=today.isoformat(),
        timezone=tz_name,
    )
    msg = (
        f"Interval start {local_start.isoformat()} is after local today "
        f"({today.isoformat()}) in {tz_name}"
    )
    raise AlignmentError(msg)
