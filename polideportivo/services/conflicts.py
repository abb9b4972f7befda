"""Slot conflict classification.

Pure decision logic over in-memory snapshots: no database, no clock. The
checks run in a fixed priority order and the first match decides the status:

    1. inactive court            -> UNAVAILABLE
    2. active maintenance        -> MAINTENANCE
    3. reservation on this court -> BOOKED
    4. user's booking elsewhere  -> USER_BOOKED
    5. already over              -> PAST
    6. otherwise                 -> AVAILABLE

All overlap checks use half-open intervals: touching endpoints never conflict.
"""

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from polideportivo.services.records import CourtRecord, MaintenanceRecord, ReservationRecord
from polideportivo.services.slots import CandidateSlot

logger = logging.getLogger(__name__)


class SlotStatus(enum.StrEnum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    MAINTENANCE = "MAINTENANCE"
    USER_BOOKED = "USER_BOOKED"
    PAST = "PAST"
    UNAVAILABLE = "UNAVAILABLE"


STATUS_COLORS = {
    SlotStatus.AVAILABLE: "#10b981",
    SlotStatus.BOOKED: "#ef4444",
    SlotStatus.MAINTENANCE: "#f59e0b",
    SlotStatus.USER_BOOKED: "#6366f1",
    SlotStatus.PAST: "#9ca3af",
    SlotStatus.UNAVAILABLE: "#dc2626",
}

STATUS_LABELS = {
    SlotStatus.AVAILABLE: "Disponible",
    SlotStatus.BOOKED: "Reservado",
    SlotStatus.MAINTENANCE: "Mantenimiento",
    SlotStatus.USER_BOOKED: "Tu reserva",
    SlotStatus.PAST: "Hora pasada",
    SlotStatus.UNAVAILABLE: "No disponible",
}


@dataclass(frozen=True)
class ClassifiedSlot:
    start: datetime
    end: datetime
    status: SlotStatus
    message: str
    conflicts: list[dict] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.status == SlotStatus.AVAILABLE

    @property
    def color(self) -> str:
        return STATUS_COLORS[self.status]


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test for [a_start, a_end) and [b_start, b_end)."""
    return a_start < b_end and b_start < a_end


def _first_overlap(slot: CandidateSlot, items: Iterable):
    return next((item for item in items if overlaps(slot.start, slot.end, item.start, item.end)), None)


def classify_slot(
    slot: CandidateSlot,
    court: CourtRecord,
    maintenance: list[MaintenanceRecord],
    court_reservations: list[ReservationRecord],
    user_reservations: list[ReservationRecord],
    user_id: int | None,
    now: datetime,
) -> ClassifiedSlot:
    """Classify one candidate slot. Never raises."""
    if not court.is_active:
        return ClassifiedSlot(slot.start, slot.end, SlotStatus.UNAVAILABLE, "Cancha inactiva")

    block = _first_overlap(slot, (m for m in maintenance if m.is_active and m.court_id == court.id))
    if block is not None:
        return ClassifiedSlot(
            slot.start,
            slot.end,
            SlotStatus.MAINTENANCE,
            f"Mantenimiento: {block.type}",
            [
                {
                    "type": "maintenance",
                    "id": block.id,
                    "description": block.description,
                    "start": block.start,
                    "end": block.end,
                }
            ],
        )

    booking = _first_overlap(slot, (r for r in court_reservations if r.is_active and r.court_id == court.id))
    if booking is not None:
        logger.debug("Slot %s overlaps reservation %s on court %s", slot.start, booking.id, court.id)
        return ClassifiedSlot(
            slot.start,
            slot.end,
            SlotStatus.BOOKED,
            "Reservado",
            [
                {
                    "type": "reservation",
                    "id": booking.id,
                    "start": booking.start,
                    "end": booking.end,
                    "status": booking.status.value,
                }
            ],
        )

    if user_id is not None:
        own = _first_overlap(
            slot,
            (r for r in user_reservations if r.is_active and r.user_id == user_id and r.court_id != court.id),
        )
        if own is not None:
            return ClassifiedSlot(
                slot.start,
                slot.end,
                SlotStatus.USER_BOOKED,
                f"Ya tienes una reserva a esta hora en la cancha {own.court_name}",
                [
                    {
                        "type": "user_reservation",
                        "id": own.id,
                        "court": own.court_name,
                        "start": own.start,
                        "end": own.end,
                        "status": own.status.value,
                    }
                ],
            )

    if slot.end <= now:
        return ClassifiedSlot(slot.start, slot.end, SlotStatus.PAST, "Hora pasada")

    return ClassifiedSlot(slot.start, slot.end, SlotStatus.AVAILABLE, "Disponible")
