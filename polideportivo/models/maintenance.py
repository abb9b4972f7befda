"""Court maintenance schedule model."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from polideportivo.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from polideportivo.models.center import Court


class MaintenanceStatus(enum.StrEnum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that block a court
ACTIVE_MAINTENANCE_STATUSES = (MaintenanceStatus.SCHEDULED, MaintenanceStatus.IN_PROGRESS)


class MaintenanceSchedule(TimestampMixin, Base):
    """A maintenance window on a court.

    Blocks [scheduled_at, completed_at) when completed_at is known,
    otherwise [scheduled_at, scheduled_at + estimated_duration minutes).
    """

    __tablename__ = "maintenance_schedules"

    id: Mapped[int] = mapped_column(primary_key=True)
    court_id: Mapped[int] = mapped_column(ForeignKey("courts.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="CLEANING", nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    estimated_duration: Mapped[int | None] = mapped_column()  # minutes
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    status: Mapped[MaintenanceStatus] = mapped_column(
        Enum(MaintenanceStatus, name="maintenance_status", values_callable=lambda e: [x.value for x in e]),
        default=MaintenanceStatus.SCHEDULED,
        nullable=False,
    )

    court: Mapped["Court"] = relationship(lazy="raise")

    __table_args__ = (Index("ix_maintenance_court_scheduled", "court_id", "scheduled_at"),)

    def __repr__(self) -> str:
        return f"<MaintenanceSchedule {self.type} court={self.court_id} at {self.scheduled_at}>"
