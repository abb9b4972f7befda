"""Shared test fixtures.

API and store tests run against a throwaway SQLite file (one per test) so
the availability reads, which each open their own session, get separate
connections just as they do on PostgreSQL.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from polideportivo.core.auth import create_access_token
from polideportivo.core.database import get_db, get_session_factory
from polideportivo.main import app
from polideportivo.models import Base, Center, Court, CourtMaintenanceStatus, User

MADRID_SETTINGS = {
    "timezone": "Europe/Madrid",
    "operatingHours": {
        "monday": {"open": "08:00", "close": "22:00", "closed": False},
        "tuesday": {"open": "08:00", "close": "22:00", "closed": False},
        "wednesday": {"open": "08:00", "close": "22:00", "closed": False},
        "thursday": {"open": "08:00", "close": "22:00", "closed": False},
        "friday": {"open": "08:00 a.m.", "close": "10:00 p.m.", "closed": False},
        "saturday": {"open": "09:00", "close": "14:00", "closed": False},
        "sunday": {"open": "09:00", "close": "14:00", "closed": True},
    },
    "exceptions": [
        {"date": "2030-12-25", "closed": True},
        {"date": "2030-12-24", "ranges": [{"start": "10:00", "end": "14:00"}]},
    ],
}


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def seed_data(session_factory):
    """One Madrid center with two active courts, one inactive court and two users."""
    async with session_factory() as db:
        center = Center(name="Polideportivo Test", slug="poli-test", settings=MADRID_SETTINGS)
        db.add(center)
        await db.flush()

        court_a = Court(center_id=center.id, name="Pista 1", sport_type="padel", sort_order=0)
        court_b = Court(center_id=center.id, name="Pista 2", sport_type="padel", sort_order=1)
        court_off = Court(
            center_id=center.id,
            name="Pista 3",
            sport_type="tenis",
            is_active=False,
            maintenance_status=CourtMaintenanceStatus.OUT_OF_ORDER,
            sort_order=2,
        )
        user = User(email="jugador@example.com", first_name="Ana", last_name="Jugadora")
        other = User(email="rival@example.com", first_name="Luis", last_name="Rival")
        db.add_all([court_a, court_b, court_off, user, other])
        await db.commit()

        return {
            "center": center,
            "court_a": court_a,
            "court_b": court_b,
            "court_off": court_off,
            "user": user,
            "other": other,
        }


@pytest.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(seed_data):
    token = create_access_token(str(seed_data["user"].id))
    return {"Authorization": f"Bearer {token}"}
