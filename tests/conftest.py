#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures.
Every test that touches the database gets its own in-memory SQLite engine.
"""

import os
import sys
from datetime import datetime
from unittest.mock import patch

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Add the project root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Test database configuration
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_ENV = {
    'APP_ENV': 'testing',
    'DATABASE_URL': TEST_DATABASE_URL,
    'SEED_DIRECTORY': 'false',
    'LOCALE': 'en',
    'WEEK_START_DAY': '1',
    'DEFAULT_TENANT_ID': 'tenant-123',
}

# Settings are read once at import time, so set them before bookcal is imported
os.environ.update(TEST_ENV)

from bookcal.db.base import init_db  # noqa: E402
from bookcal.scheduling.models import Appointment, AppointmentStatus  # noqa: E402


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Keep the test environment in place for code that reads os.environ lazily"""
    with patch.dict(os.environ, TEST_ENV):
        yield


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as session:
        yield session


@pytest.fixture
def client():
    """
    TestClient backed by a fresh in-memory database with the demo directory.
    Tables are created on the first request so the engine lives on the app's loop.
    """
    from fastapi.testclient import TestClient
    from bookcal.crud.directory import seed_directory
    from bookcal.db.session import get_session
    from bookcal.main import app

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    state = {"ready": False}

    async def override_get_session():
        if not state["ready"]:
            await init_db(engine)
            async with factory() as session:
                await seed_directory(session)
            state["ready"] = True
        async with factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    try:
        with TestClient(app) as test_client:
            yield test_client
            test_client.portal.call(engine.dispose)
    finally:
        app.dependency_overrides.clear()


def make_appointment(appt_id, start, end, staff_id="staff-1", **kw):
    """Plain in-memory appointment for engine tests"""
    return Appointment(
        id=appt_id,
        start=start,
        end=end,
        staff_id=staff_id,
        service_id=kw.pop("service_id", "service-1"),
        status=kw.pop("status", AppointmentStatus.CONFIRMED),
        tenant_id=kw.pop("tenant_id", "tenant-123"),
        **kw,
    )


@pytest.fixture
def appt():
    return make_appointment


@pytest.fixture
def at():
    """Shorthand for datetimes on a fixed test day: at(10) -> 2025-03-04 10:00"""
    def _at(hour, minute=0, day=4, month=3, year=2025):
        return datetime(year, month, day, hour, minute)
    return _at


# Pytest configuration hooks
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "smoke: Quick validation tests")
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies")
    config.addinivalue_line("markers", "integration: Tests through the database or HTTP app")
    config.addinivalue_line("markers", "slow: Long-running tests")


def pytest_collection_modifyitems(config, items):
    """Run smoke tests first and slow tests last"""
    def test_priority(item):
        if item.get_closest_marker("smoke"):
            return 0
        elif item.get_closest_marker("integration"):
            return 2
        elif item.get_closest_marker("slow"):
            return 3
        else:
            return 1

    items[:] = sorted(items, key=test_priority)
