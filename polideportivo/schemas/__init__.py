"""Pydantic schemas for API serialisation."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

# --- Court ---


class CourtOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sport_type: str
    is_active: bool
    maintenance_status: str


# --- Availability ---


class ConflictOut(BaseModel):
    type: str  # maintenance | reservation | user_reservation
    id: int | None = None
    start: datetime
    end: datetime
    status: str | None = None
    court: str | None = None
    description: str | None = None


class SlotOut(BaseModel):
    start_time: str  # "HH:MM" local
    end_time: str  # "HH:MM" local
    time: datetime  # slot start, UTC
    status: str
    color: str
    message: str
    available: bool
    conflicts: list[ConflictOut]


class AvailabilitySummary(BaseModel):
    total: int
    available: int
    booked: int
    maintenance: int
    user_booked: int
    past: int
    unavailable: int


class LegendEntry(BaseModel):
    color: str
    label: str


class AvailabilityOut(BaseModel):
    court_id: int
    court_name: str
    date: date
    duration: int
    timezone: str
    closed: bool
    summary: AvailabilitySummary
    legend: dict[str, LegendEntry]
    slots: list[SlotOut]


class SlotCheckRequest(BaseModel):
    start_time: datetime
    duration: int = 60
    exclude_reservation_id: int | None = None


class RequestedSlot(BaseModel):
    start_time: datetime
    end_time: datetime
    duration: int


class SlotCheckOut(BaseModel):
    available: bool
    court_id: int
    requested_slot: RequestedSlot
    message: str
