"""Read-only snapshots of the rows the availability engine works on.

The store converts ORM rows into these plain values (timestamps as aware
UTC) so slot generation and classification never touch a session.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from polideportivo.core.config import settings
from polideportivo.models.maintenance import ACTIVE_MAINTENANCE_STATUSES, MaintenanceStatus
from polideportivo.models.reservation import ACTIVE_RESERVATION_STATUSES, ReservationStatus


@dataclass(frozen=True)
class CourtRecord:
    id: int
    name: str
    center_id: int
    is_active: bool
    maintenance_status: str
    sport_type: str = "padel"
    center_settings: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ReservationRecord:
    id: int
    court_id: int
    user_id: int
    start: datetime
    end: datetime
    status: ReservationStatus
    court_name: str = ""

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_RESERVATION_STATUSES


@dataclass(frozen=True)
class MaintenanceRecord:
    id: int
    court_id: int
    type: str
    scheduled_at: datetime
    status: MaintenanceStatus
    description: str | None = None
    estimated_duration: int | None = None
    completed_at: datetime | None = None

    @property
    def start(self) -> datetime:
        return self.scheduled_at

    @property
    def end(self) -> datetime:
        """Explicit completion time if known, otherwise the estimated duration (default 2h)."""
        if self.completed_at is not None:
            return self.completed_at
        minutes = self.estimated_duration
        if minutes is None:
            minutes = settings.default_maintenance_minutes
        return self.scheduled_at + timedelta(minutes=minutes)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_MAINTENANCE_STATUSES
