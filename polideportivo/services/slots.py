"""Candidate slot generation from resolved opening hours.

Slots start every 30 minutes and last the requested duration. A slot is only
offered when it ends inside the opening range it starts in. Each slot's start
is converted to UTC exactly once, here; its end is start plus duration, so a
slot spanning a DST change still lasts the elapsed time that was asked for.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from polideportivo.services.schedule import DaySchedule
from polideportivo.services.time_utils import localize, utc_to_local

SLOT_MINUTES = 30


@dataclass(frozen=True)
class CandidateSlot:
    """An unclassified slot, bounds in aware UTC."""

    start: datetime
    end: datetime


def _exists_locally(wall: datetime, instant: datetime, tz: ZoneInfo | str) -> bool:
    # Wall times in a spring-forward gap do not survive the round trip
    return utc_to_local(instant, tz).replace(tzinfo=None) == wall


def generate_candidate_slots(
    schedule: DaySchedule,
    query_date: date,
    duration_minutes: int,
    tz: ZoneInfo | str,
) -> list[CandidateSlot]:
    """Enumerate every [t, t + duration) that fits inside an opening range.

    A closed day yields no slots; callers check schedule.closed rather than
    inferring closure from an empty list. Starts that do not exist on the
    local clock are skipped.
    """
    if schedule.closed:
        return []

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=SLOT_MINUTES)
    slots: list[CandidateSlot] = []

    for interval in schedule.intervals:
        current = datetime.combine(query_date, interval.start)
        close = datetime.combine(query_date, interval.end)
        close_utc = localize(close, tz)

        while current < close:
            start = localize(current, tz)
            end = start + duration
            if end <= close_utc and _exists_locally(current, start, tz):
                slots.append(CandidateSlot(start=start, end=end))
            current += step

    return slots
