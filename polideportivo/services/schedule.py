"""Center operating schedule: validated config and per-date resolution.

Center settings are an admin-edited JSON blob, so parsing is fail-soft:
malformed entries are logged and dropped, never raised. The blob is read
exactly once, in CenterScheduleConfig.from_settings; everything after that
works on the validated struct.

Stored keys:
    schedule_slots   weekly split hours {monday: {closed, slots: [{start, end}]}, ...}
                     up to four ranges a day; wins over the single-range maps
                     for any day it configures
    operatingHours   single-range weekly hours {monday: {open, close, closed}, ...}
    business_hours   legacy weekly hours, same shape (used only when
                     operatingHours is absent)
    exceptions       [{date, closed, ranges: [{start, end}]}]
    timezone         IANA zone name
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from polideportivo.services.time_utils import format_hhmm, parse_time_string, resolve_timezone

logger = logging.getLogger(__name__)

# Indexed by date.weekday() (0=Mon)
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

WEEKLY_SLOTS_KEY = "schedule_slots"
WEEKLY_HOURS_KEY = "operatingHours"
LEGACY_WEEKLY_HOURS_KEY = "business_hours"

MAX_RANGES_PER_DAY = 4

SOURCE_EXCEPTION = "exception"
SOURCE_WEEKLY = "weekly"


class DayHours(BaseModel):
    open: str | None = None
    close: str | None = None
    closed: bool | None = False


class TimeRange(BaseModel):
    start: str
    end: str


class DaySlots(BaseModel):
    closed: bool | None = False
    slots: list[TimeRange] = Field(default_factory=list)


class ScheduleException(BaseModel):
    """A date-specific override of the weekly schedule."""

    model_config = ConfigDict(populate_by_name=True)

    on: date = Field(alias="date")
    closed: bool | None = False
    ranges: list[TimeRange] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flat_range(cls, data):
        # Older admin forms saved a single {date, start, end} without a ranges list
        if isinstance(data, dict) and not data.get("ranges") and data.get("start") and data.get("end"):
            data = {**data, "ranges": [{"start": data["start"], "end": data["end"]}]}
        return data


class CenterScheduleConfig(BaseModel):
    weekly_slots: dict[str, DaySlots] = Field(default_factory=dict)
    weekly_hours: dict[str, DayHours] = Field(default_factory=dict)
    exceptions: dict[date, ScheduleException] = Field(default_factory=dict)
    timezone: str | None = None

    @classmethod
    def from_settings(cls, blob: dict | None) -> "CenterScheduleConfig":
        """Build the config from a center's raw settings blob."""
        blob = blob if isinstance(blob, dict) else {}

        if blob.get(WEEKLY_HOURS_KEY):
            raw_weekly = blob.get(WEEKLY_HOURS_KEY)
        else:
            raw_weekly = blob.get(LEGACY_WEEKLY_HOURS_KEY)
            if raw_weekly:
                logger.info("Center uses legacy %s schedule", LEGACY_WEEKLY_HOURS_KEY)

        return cls(
            weekly_slots=_parse_weekly(blob.get(WEEKLY_SLOTS_KEY), DaySlots),
            weekly_hours=_parse_weekly(raw_weekly, DayHours),
            exceptions=_parse_exceptions(blob.get("exceptions")),
            timezone=blob.get("timezone") if isinstance(blob.get("timezone"), str) else None,
        )

    @property
    def zone(self) -> ZoneInfo:
        return resolve_timezone(self.timezone)


def _parse_weekly(raw, model: type[BaseModel]) -> dict:
    if not raw:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring weekly hours of type %s", type(raw).__name__)
        return {}

    weekly = {}
    for key, entry in raw.items():
        day_name = str(key).strip().lower()
        if day_name not in WEEKDAYS:
            logger.warning("Ignoring weekly hours for unknown day %r", key)
            continue
        try:
            weekly[day_name] = model.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Ignoring malformed weekly hours for %s: %s", day_name, exc.errors())
    return weekly


def _weekly_ranges(config: CenterScheduleConfig, day_name: str) -> list[tuple[str | None, str | None]] | None:
    """Raw ranges for a weekday, or None when the day is closed or unset.

    A schedule_slots entry wins when it is closed or lists ranges; an entry
    with neither falls through to the single-range hours.
    """
    split = config.weekly_slots.get(day_name)
    if split is not None:
        if split.closed:
            return None
        if split.slots:
            if len(split.slots) > MAX_RANGES_PER_DAY:
                logger.warning(
                    "%s has %d opening ranges, keeping the first %d",
                    day_name,
                    len(split.slots),
                    MAX_RANGES_PER_DAY,
                )
            return [(r.start, r.end) for r in split.slots[:MAX_RANGES_PER_DAY]]

    hours = config.weekly_hours.get(day_name)
    if hours is None or hours.closed:
        return None
    return [(hours.open, hours.close)]


def _parse_exceptions(raw) -> dict[date, ScheduleException]:
    if not raw:
        return {}
    if not isinstance(raw, list):
        logger.warning("Ignoring schedule exceptions of type %s", type(raw).__name__)
        return {}

    exceptions: dict[date, ScheduleException] = {}
    for entry in raw:
        try:
            exception = ScheduleException.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Ignoring malformed schedule exception: %s", exc.errors())
            continue
        if exception.on in exceptions:
            logger.warning("Duplicate schedule exception for %s, keeping the first", exception.on)
            continue
        exceptions[exception.on] = exception
    return exceptions


@dataclass(frozen=True)
class LocalInterval:
    """A half-open local wall-clock range [start, end)."""

    start: time
    end: time

    def __str__(self) -> str:
        return f"{format_hhmm(self.start)}-{format_hhmm(self.end)}"


@dataclass(frozen=True)
class DaySchedule:
    """Resolved opening for one date. No intervals means closed."""

    intervals: tuple[LocalInterval, ...]
    source: str

    @property
    def closed(self) -> bool:
        return not self.intervals

    @classmethod
    def closed_day(cls, source: str) -> "DaySchedule":
        return cls(intervals=(), source=source)


def resolve_schedule(config: CenterScheduleConfig, day: date) -> DaySchedule:
    """Return the open local intervals for `day`, or a closed DaySchedule.

    Precedence: closed exception, then exception ranges, then weekly split
    hours, then weekly single-range hours. An exception with no ranges that
    is not closed changes nothing.
    """
    exception = config.exceptions.get(day)

    if exception is not None and exception.closed:
        logger.info("Closed on %s by exception", day)
        return DaySchedule.closed_day(SOURCE_EXCEPTION)

    if exception is not None and exception.ranges:
        raw = [(r.start, r.end) for r in exception.ranges]
        source = SOURCE_EXCEPTION
    else:
        if exception is not None:
            logger.debug("Exception for %s has no ranges, using weekly hours", day)
        day_name = WEEKDAYS[day.weekday()]
        raw = _weekly_ranges(config, day_name)
        if raw is None:
            logger.info("Closed on %s (%s)", day, day_name)
            return DaySchedule.closed_day(SOURCE_WEEKLY)
        source = SOURCE_WEEKLY

    intervals = _clean_intervals(raw, day)
    if not intervals:
        logger.warning("No valid opening hours on %s, treating as closed", day)
    return DaySchedule(intervals=intervals, source=source)


def _clean_intervals(raw: list[tuple[str | None, str | None]], day: date) -> tuple[LocalInterval, ...]:
    """Parse, drop invalid, sort, and merge overlapping or touching ranges."""
    parsed: list[LocalInterval] = []
    for start_raw, end_raw in raw:
        start = parse_time_string(start_raw)
        end = parse_time_string(end_raw)
        if start is None or end is None:
            logger.warning("Unreadable opening range %r-%r on %s", start_raw, end_raw, day)
            continue
        if start >= end:
            logger.warning("Opening range %r-%r on %s does not end after it starts", start_raw, end_raw, day)
            continue
        parsed.append(LocalInterval(start, end))

    parsed.sort(key=lambda i: i.start)
    merged: list[LocalInterval] = []
    for interval in parsed:
        if merged and interval.start <= merged[-1].end:
            last = merged.pop()
            interval = LocalInterval(last.start, max(last.end, interval.end))
        merged.append(interval)
    return tuple(merged)
