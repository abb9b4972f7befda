"""Court availability queries.

Coordinates the pure pieces (schedule resolution, slot generation,
classification) around one round of parallel store reads. Nothing here
returns a partial answer: a failed read fails the whole query.
"""

import asyncio
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta

from polideportivo.core.config import settings
from polideportivo.services.conflicts import (
    STATUS_COLORS,
    STATUS_LABELS,
    ClassifiedSlot,
    SlotStatus,
    classify_slot,
    overlaps,
)
from polideportivo.services.records import CourtRecord
from polideportivo.services.schedule import CenterScheduleConfig, resolve_schedule
from polideportivo.services.slots import generate_candidate_slots
from polideportivo.services.store import AvailabilityStore
from polideportivo.services.time_utils import format_hhmm, utc_to_local

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AvailabilityError(Exception):
    """Base for availability query failures that are the caller's fault."""

    def __init__(self, rule: str, message: str):
        self.rule = rule
        self.message = message
        super().__init__(message)


class InvalidAvailabilityQuery(AvailabilityError):
    """Malformed date, duration out of range, and similar."""


class CourtNotFound(AvailabilityError):
    def __init__(self, court_id: int):
        self.court_id = court_id
        super().__init__("court_not_found", "Cancha no encontrada")


def parse_query_date(value: str | None) -> date:
    """Parse a strict YYYY-MM-DD date."""
    if not value:
        raise InvalidAvailabilityQuery("missing_date", "Fecha requerida")
    if not _ISO_DATE.match(value):
        raise InvalidAvailabilityQuery("invalid_date", "Formato de fecha debe ser YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidAvailabilityQuery("invalid_date", f"Fecha inexistente: {value}")


def check_duration(duration_minutes: int, minimum: int = 1) -> None:
    if duration_minutes < minimum or duration_minutes > settings.max_duration_minutes:
        raise InvalidAvailabilityQuery(
            "invalid_duration",
            f"La duración debe estar entre {minimum} y {settings.max_duration_minutes} minutos",
        )


def _load_window(query_date: date) -> tuple[datetime, datetime]:
    """UTC window wide enough to cover the local day in any time zone.

    The center's zone is only known once its settings are loaded, and that
    read runs in parallel with the others, so the window is padded a day
    each side. Classification does the exact overlap tests.
    """
    start = datetime.combine(query_date - timedelta(days=1), time(0, 0), tzinfo=UTC)
    end = datetime.combine(query_date + timedelta(days=2), time(0, 0), tzinfo=UTC)
    return start, end


async def _no_reservations() -> list:
    return []


@dataclass
class AvailabilityResult:
    court: CourtRecord
    date: date
    duration: int
    timezone: str
    closed: bool
    slots: list[dict] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        counts = Counter(s["status"] for s in self.slots)
        return {
            "total": len(self.slots),
            "available": counts[SlotStatus.AVAILABLE],
            "booked": counts[SlotStatus.BOOKED],
            "maintenance": counts[SlotStatus.MAINTENANCE],
            "user_booked": counts[SlotStatus.USER_BOOKED],
            "past": counts[SlotStatus.PAST],
            "unavailable": counts[SlotStatus.UNAVAILABLE],
        }


def legend() -> dict[str, dict[str, str]]:
    return {status.value: {"color": STATUS_COLORS[status], "label": STATUS_LABELS[status]} for status in SlotStatus}


def _slot_view(slot: ClassifiedSlot, tz) -> dict:
    return {
        "start_time": format_hhmm(utc_to_local(slot.start, tz)),
        "end_time": format_hhmm(utc_to_local(slot.end, tz)),
        "time": slot.start,
        "status": slot.status,
        "color": slot.color,
        "message": slot.message,
        "available": slot.available,
        "conflicts": slot.conflicts,
    }


async def get_availability(
    store: AvailabilityStore,
    court_id: int,
    date_value: str | None,
    duration_minutes: int,
    user_id: int | None,
    now: datetime | None = None,
) -> AvailabilityResult:
    """Compute the classified slots for a court on a date.

    Raises InvalidAvailabilityQuery before any read when the input is bad,
    CourtNotFound when the court does not exist. Store errors propagate.
    """
    query_date = parse_query_date(date_value)
    check_duration(duration_minutes)
    now = now or datetime.now(UTC)

    window_start, window_end = _load_window(query_date)
    court, maintenance, court_reservations, user_reservations = await asyncio.gather(
        store.get_court(court_id),
        store.list_court_maintenance(court_id, window_start, window_end),
        store.list_court_reservations(court_id, window_start, window_end),
        store.list_user_reservations(user_id, window_start, window_end) if user_id is not None else _no_reservations(),
    )
    if court is None:
        raise CourtNotFound(court_id)

    config = CenterScheduleConfig.from_settings(court.center_settings)
    zone = config.zone
    schedule = resolve_schedule(config, query_date)

    if schedule.closed:
        logger.info("Court %s closed on %s", court_id, query_date)
        return AvailabilityResult(
            court=court, date=query_date, duration=duration_minutes, timezone=zone.key, closed=True
        )

    candidates = generate_candidate_slots(schedule, query_date, duration_minutes, zone)
    classified = [
        classify_slot(slot, court, maintenance, court_reservations, user_reservations, user_id, now)
        for slot in candidates
    ]

    result = AvailabilityResult(
        court=court,
        date=query_date,
        duration=duration_minutes,
        timezone=zone.key,
        closed=False,
        slots=[_slot_view(s, zone) for s in classified],
    )
    logger.info(
        "Availability court=%s date=%s duration=%s: %s",
        court_id,
        query_date,
        duration_minutes,
        result.summary,
    )
    return result


@dataclass
class SlotCheck:
    court_id: int
    start: datetime
    end: datetime
    duration: int
    available: bool
    message: str


async def check_slot_availability(
    store: AvailabilityStore,
    court_id: int,
    start: datetime,
    duration_minutes: int,
    exclude_reservation_id: int | None = None,
) -> SlotCheck:
    """Check one exact slot: court active, no reservation or maintenance overlap.

    exclude_reservation_id lets a reschedule ignore the reservation being moved.
    """
    check_duration(duration_minutes, minimum=settings.min_check_duration_minutes)
    if start.tzinfo is None:
        start = start.replace(tzinfo=UTC)
    start = start.astimezone(UTC)
    end = start + timedelta(minutes=duration_minutes)

    court, maintenance, reservations = await asyncio.gather(
        store.get_court(court_id),
        store.list_court_maintenance(court_id, start, end),
        store.list_court_reservations(court_id, start, end),
    )
    if court is None:
        raise CourtNotFound(court_id)

    clash = not court.is_active or any(
        overlaps(start, end, r.start, r.end)
        for r in reservations
        if r.is_active and r.id != exclude_reservation_id
    ) or any(overlaps(start, end, m.start, m.end) for m in maintenance if m.is_active)

    if clash:
        message = "Horario no disponible - existe conflicto con otra reserva o mantenimiento"
    else:
        message = "Horario disponible"
    return SlotCheck(
        court_id=court_id, start=start, end=end, duration=duration_minutes, available=not clash, message=message
    )
