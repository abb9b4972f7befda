"""Wall-clock parsing and facility time-zone conversion.

Pure calculation module: no database, no async, no FastAPI dependencies.
Admin-entered times arrive in assorted shapes ("8:00 a.m.", "10:00 PM",
"22:00"); everything downstream works on datetime.time or aware UTC datetimes.
"""

import logging
import re
from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from polideportivo.core.config import settings

logger = logging.getLogger(__name__)

MIDNIGHT_HHMM = "00:00"

_HHMM_24 = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})(am|pm)?$")
_MERIDIEM = re.compile(r"([ap])\.?m\.?$")


def parse_time_string(value: str | None) -> time | None:
    """Parse a human-entered clock time. Returns None when it cannot be read.

    "8:00 a.m." -> 08:00, "12:00am" -> 00:00, "12:00 PM" -> 12:00, "22:00" -> 22:00
    """
    if value is None:
        return None
    s = re.sub(r"\s+", "", str(value)).lower()
    s = _MERIDIEM.sub(r"\1m", s)

    match = _CLOCK.match(s)
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = match.group(3)

    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        if meridiem == "am":
            hour = 0 if hour == 12 else hour
        elif hour != 12:
            hour += 12
    elif hour > 23:
        return None

    return time(hour, minute)


def normalize_time_string(value: str | None) -> str:
    """Return the canonical 24-hour "HH:MM" form of a clock time.

    Fail-soft: anything unreadable becomes "00:00", so callers cannot tell a
    configured midnight from garbage. Use parse_time_string when that matters.
    """
    if value is not None and _HHMM_24.match(str(value)):
        return str(value)
    parsed = parse_time_string(value)
    if parsed is None:
        return MIDNIGHT_HHMM
    return format_hhmm(parsed)


def format_hhmm(value: time | datetime) -> str:
    return value.strftime("%H:%M")


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Look up an IANA zone, falling back to the facility default."""
    if not name:
        return ZoneInfo(settings.default_timezone)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to %s", name, settings.default_timezone)
        return ZoneInfo(settings.default_timezone)


def _zone(tz: ZoneInfo | str) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else resolve_timezone(tz)


def localize(local: datetime, tz: ZoneInfo | str) -> datetime:
    """Attach the facility zone to a naive wall-clock datetime and convert to UTC.

    Times inside a DST gap or overlap resolve with fold=0.
    """
    return local.replace(tzinfo=_zone(tz)).astimezone(UTC)


def local_to_utc(day: date, hhmm: str | time, tz: ZoneInfo | str) -> datetime:
    """Convert a local wall-clock time on `day` to an aware UTC datetime."""
    wall = hhmm if isinstance(hhmm, time) else parse_time_string(hhmm)
    if wall is None:
        raise ValueError(f"Invalid time: {hhmm!r}")
    return localize(datetime.combine(day, wall), tz)


def utc_to_local(instant: datetime, tz: ZoneInfo | str) -> datetime:
    """Convert a UTC instant to the facility's wall clock. Naive input is taken as UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(_zone(tz))


def as_utc(instant: datetime) -> datetime:
    """Normalise a stored timestamp to aware UTC (SQLite hands back naive values)."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)

