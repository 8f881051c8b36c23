"""Shared test fixtures."""
import asyncio
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.db import init_db, make_engine, make_session_maker
from app.services.clinic_config_service import ClinicConfigData, save_clinic_config
from app.services.slot_service import TimeWindow

# "today" is 2024-01-01 in UTC for every test
NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
BOOKING_DATE = "2024-01-10"


def make_clinic_config(**overrides) -> ClinicConfigData:
    values = {
        "slot_minutes": 15,
        "timezone": "UTC",
        "work_hours": TimeWindow("09:00", "10:00"),
        "breaks": (),
        "max_days_ahead": 30,
    }
    values.update(overrides)
    return ClinicConfigData(**values)


@pytest.fixture
def clinic_config() -> ClinicConfigData:
    return make_clinic_config()


@pytest.fixture
def database_url(tmp_path) -> str:
    # A file database so each session gets its own connection
    return f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    engine = make_engine(database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def client(database_url):
    """TestClient against a fresh database holding the default clinic config."""
    from app.api.deps import get_now, get_session
    from app.main import app

    engine = make_engine(database_url)
    maker = make_session_maker(engine)

    async def _prepare() -> None:
        await init_db(engine)
        async with maker() as session:
            await save_clinic_config(session, make_clinic_config())
            await session.commit()
        # Connections opened here belong to this event loop, not the client's
        await engine.dispose()

    asyncio.run(_prepare())

    async def _get_session():
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_now] = lambda: NOW
    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(engine.dispose)
    app.dependency_overrides.clear()
