"""Center and court models.

Center = a sports facility (tenant). Its schedule lives in the `settings`
JSON blob: operatingHours, business_hours (legacy), exceptions, timezone.
Court = an individual bookable court at a center.
"""

import enum

from sqlalchemy import Boolean, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from polideportivo.models.base import Base, JSONType, TimestampMixin


class CourtMaintenanceStatus(enum.StrEnum):
    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    OUT_OF_ORDER = "out_of_order"


class Center(TimestampMixin, Base):
    __tablename__ = "centers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    address: Mapped[str | None] = mapped_column(Text)

    # Flexible config (schedule, exceptions, timezone, receipts, etc.)
    settings: Mapped[dict | None] = mapped_column(JSONType, default=dict)

    # Relationships
    courts: Mapped[list["Court"]] = relationship(back_populates="center")

    def __repr__(self) -> str:
        return f"<Center {self.slug}>"


class Court(TimestampMixin, Base):
    __tablename__ = "courts"

    id: Mapped[int] = mapped_column(primary_key=True)
    center_id: Mapped[int] = mapped_column(ForeignKey("centers.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    sport_type: Mapped[str] = mapped_column(String(50), default="padel", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    maintenance_status: Mapped[CourtMaintenanceStatus] = mapped_column(
        Enum(CourtMaintenanceStatus, name="court_maintenance_status", values_callable=lambda e: [x.value for x in e]),
        default=CourtMaintenanceStatus.OPERATIONAL,
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(default=0, nullable=False)

    # Relationships
    center: Mapped["Center"] = relationship(back_populates="courts")

    __table_args__ = (Index("ix_courts_center", "center_id"),)

    def __repr__(self) -> str:
        return f"<Court {self.name} @ center {self.center_id}>"
