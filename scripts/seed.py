"""Seed the database with a demo sports center.

Run with: python -m scripts.seed
Creates one Madrid center with its weekly hours, courts, a test user and a
scheduled maintenance window so the availability grid has something to show.
"""

import asyncio
from datetime import UTC, datetime, timedelta

from sqlalchemy import select

from polideportivo.core.auth import create_access_token
from polideportivo.core.database import async_session_factory, engine
from polideportivo.models import Base, Center, Court, CourtMaintenanceStatus, MaintenanceSchedule, User

WEEKDAY_HOURS = {"open": "08:00", "close": "22:00", "closed": False}

CENTER = {
    "name": "Polideportivo Municipal Chamberí",
    "slug": "chamberi",
    "address": "Calle de Vallehermoso 59, Madrid",
    "settings": {
        "timezone": "Europe/Madrid",
        "operatingHours": {
            "monday": WEEKDAY_HOURS,
            "tuesday": WEEKDAY_HOURS,
            "wednesday": WEEKDAY_HOURS,
            "thursday": WEEKDAY_HOURS,
            "friday": WEEKDAY_HOURS,
            "saturday": {"open": "09:00", "close": "21:00", "closed": False},
            "sunday": {"open": "09:00", "close": "14:00", "closed": False},
        },
        "exceptions": [
            {"date": "2030-01-01", "closed": True},
            {"date": "2030-12-24", "ranges": [{"start": "09:00", "end": "14:00"}]},
            {"date": "2030-12-25", "closed": True},
        ],
    },
}

# Pista 6 is waiting on new glass panels
COURTS = [
    {"name": "Pista 1", "sport_type": "padel"},
    {"name": "Pista 2", "sport_type": "padel"},
    {"name": "Pista 3", "sport_type": "padel"},
    {"name": "Pista 4", "sport_type": "padel"},
    {"name": "Pista 5", "sport_type": "tenis"},
    {
        "name": "Pista 6",
        "sport_type": "padel",
        "is_active": False,
        "maintenance_status": CourtMaintenanceStatus.OUT_OF_ORDER,
    },
]


async def seed():
    # Create tables (in dev; production uses Alembic migrations)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Center).where(Center.slug == CENTER["slug"]))
        if result.scalar_one_or_none():
            print("Database already seeded, skipping.")
            return

        center = Center(**CENTER)
        db.add(center)
        await db.flush()

        courts = []
        for i, court_data in enumerate(COURTS):
            court = Court(center_id=center.id, sort_order=i, **court_data)
            db.add(court)
            courts.append(court)
        await db.flush()

        # Cleaning on Pista 1 tomorrow morning, default two hour window
        tomorrow = datetime.now(UTC).replace(hour=8, minute=0, second=0, microsecond=0) + timedelta(days=1)
        db.add(
            MaintenanceSchedule(
                court_id=courts[0].id,
                type="CLEANING",
                description="Limpieza de cristales",
                scheduled_at=tomorrow,
            )
        )

        player = User(email="jugador@example.com", first_name="Test", last_name="Jugador")
        db.add(player)
        await db.commit()

        print(f"Seeded: {center.name}")
        print(f"  {len(COURTS)} courts ({sum(1 for c in COURTS if c.get('is_active', True))} active)")
        print(f"  test user {player.email}")
        print(f"  access token: {create_access_token(str(player.id))}")


if __name__ == "__main__":
    asyncio.run(seed())
