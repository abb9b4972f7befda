"""Reservation model.

A reservation holds a court for a user over a UTC interval [start_time, end_time).
Lifecycle: PENDING -> PAID -> IN_PROGRESS -> COMPLETED / NO_SHOW,
with CANCELLED reachable from PENDING and PAID.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from polideportivo.models.base import Base, TimestampMixin


class ReservationStatus(enum.StrEnum):
    PENDING = "PENDING"
    PAID = "PAID"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Statuses that occupy a court
ACTIVE_RESERVATION_STATUSES = (
    ReservationStatus.PENDING,
    ReservationStatus.PAID,
    ReservationStatus.IN_PROGRESS,
)


class Reservation(TimestampMixin, Base):
    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True)
    court_id: Mapped[int] = mapped_column(ForeignKey("courts.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus, name="reservation_status", values_callable=lambda e: [x.value for x in e]),
        default=ReservationStatus.PENDING,
        nullable=False,
    )

    # Relationships
    court: Mapped["Court"] = relationship()

    __table_args__ = (
        Index("ix_reservations_court_start", "court_id", "start_time"),
        Index("ix_reservations_user_start", "user_id", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<Reservation {self.start_time}-{self.end_time} court={self.court_id} {self.status.value}>"


# Import for type hints
from polideportivo.models.center import Court  # noqa: E402
