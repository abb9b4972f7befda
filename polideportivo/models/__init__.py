"""All models imported here for Alembic autogenerate discovery."""

from polideportivo.models.base import Base
from polideportivo.models.center import Center, Court, CourtMaintenanceStatus
from polideportivo.models.maintenance import ACTIVE_MAINTENANCE_STATUSES, MaintenanceSchedule, MaintenanceStatus
from polideportivo.models.reservation import ACTIVE_RESERVATION_STATUSES, Reservation, ReservationStatus
from polideportivo.models.user import User

__all__ = [
    "Base",
    "Center",
    "Court",
    "CourtMaintenanceStatus",
    "User",
    "Reservation",
    "ReservationStatus",
    "ACTIVE_RESERVATION_STATUSES",
    "MaintenanceSchedule",
    "MaintenanceStatus",
    "ACTIVE_MAINTENANCE_STATUSES",
]
