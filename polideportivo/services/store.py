"""Data access for availability queries.

Each read opens its own session so the orchestrator can run them
concurrently. Rows come back as the plain snapshots in services.records.
"""

from datetime import datetime, timedelta
from typing import Protocol

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from polideportivo.core.config import settings
from polideportivo.models.center import Court
from polideportivo.models.maintenance import ACTIVE_MAINTENANCE_STATUSES, MaintenanceSchedule
from polideportivo.models.reservation import ACTIVE_RESERVATION_STATUSES, Reservation
from polideportivo.services.records import CourtRecord, MaintenanceRecord, ReservationRecord
from polideportivo.services.time_utils import as_utc


class AvailabilityStore(Protocol):
    async def get_court(self, court_id: int) -> CourtRecord | None: ...

    async def list_court_maintenance(
        self, court_id: int, window_start: datetime, window_end: datetime
    ) -> list[MaintenanceRecord]: ...

    async def list_court_reservations(
        self, court_id: int, window_start: datetime, window_end: datetime
    ) -> list[ReservationRecord]: ...

    async def list_user_reservations(
        self, user_id: int, window_start: datetime, window_end: datetime
    ) -> list[ReservationRecord]: ...


def _reservation_record(row: Reservation) -> ReservationRecord:
    return ReservationRecord(
        id=row.id,
        court_id=row.court_id,
        user_id=row.user_id,
        start=as_utc(row.start_time),
        end=as_utc(row.end_time),
        status=row.status,
        court_name=row.court.name,
    )


class SqlAvailabilityStore:
    """AvailabilityStore backed by the SQLAlchemy models."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_court(self, court_id: int) -> CourtRecord | None:
        async with self._session_factory() as db:
            result = await db.execute(select(Court).options(selectinload(Court.center)).where(Court.id == court_id))
            court = result.scalar_one_or_none()
            if court is None:
                return None
            return CourtRecord(
                id=court.id,
                name=court.name,
                center_id=court.center_id,
                is_active=court.is_active,
                maintenance_status=str(court.maintenance_status),
                sport_type=court.sport_type,
                center_settings=dict(court.center.settings or {}),
            )

    async def list_court_maintenance(
        self, court_id: int, window_start: datetime, window_end: datetime
    ) -> list[MaintenanceRecord]:
        """Active maintenance that may touch the window.

        The effective end depends on estimated_duration, so this over-fetches
        anything started in the lookback period before the window that is not
        known to have finished; the classifier does the exact overlap test.
        Rows left open for longer than the lookback are not read.
        """
        async with self._session_factory() as db:
            result = await db.execute(
                select(MaintenanceSchedule)
                .where(
                    MaintenanceSchedule.court_id == court_id,
                    MaintenanceSchedule.status.in_(ACTIVE_MAINTENANCE_STATUSES),
                    MaintenanceSchedule.scheduled_at < window_end,
                    MaintenanceSchedule.scheduled_at
                    >= window_start - timedelta(days=settings.maintenance_lookback_days),
                    or_(
                        MaintenanceSchedule.completed_at.is_(None),
                        MaintenanceSchedule.completed_at > window_start,
                    ),
                )
                .order_by(MaintenanceSchedule.scheduled_at)
            )
            return [
                MaintenanceRecord(
                    id=m.id,
                    court_id=m.court_id,
                    type=m.type,
                    description=m.description,
                    scheduled_at=as_utc(m.scheduled_at),
                    estimated_duration=m.estimated_duration,
                    completed_at=as_utc(m.completed_at) if m.completed_at else None,
                    status=m.status,
                )
                for m in result.scalars().all()
            ]

    async def list_court_reservations(
        self, court_id: int, window_start: datetime, window_end: datetime
    ) -> list[ReservationRecord]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(Reservation)
                .options(selectinload(Reservation.court))
                .where(
                    Reservation.court_id == court_id,
                    Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
                    Reservation.start_time < window_end,
                    Reservation.end_time > window_start,
                )
                .order_by(Reservation.start_time)
            )
            return [_reservation_record(r) for r in result.scalars().all()]

    async def list_user_reservations(
        self, user_id: int, window_start: datetime, window_end: datetime
    ) -> list[ReservationRecord]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(Reservation)
                .options(selectinload(Reservation.court))
                .where(
                    Reservation.user_id == user_id,
                    Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
                    Reservation.start_time < window_end,
                    Reservation.end_time > window_start,
                )
                .order_by(Reservation.start_time)
            )
            return [_reservation_record(r) for r in result.scalars().all()]
