"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from backend.assistant.audit.sinks import InMemoryLogSink, SqlLogSink
from backend.assistant.config import Settings
from backend.assistant.db.engine import create_async_engine_from_settings, create_session_factory
from backend.assistant.db.models import Base
from backend.assistant.models.common import DestinationInput
from backend.assistant.store.inmemory import InMemoryTripStore
from backend.assistant.store.sql import SqlTripStore

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def settings() -> Settings:
    """Settings with no database configured."""
    return Settings(database_url=None, _env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def memory_store() -> InMemoryTripStore:
    return InMemoryTripStore()


@pytest.fixture
def memory_sink() -> InMemoryLogSink:
    return InMemoryLogSink()


@pytest_asyncio.fixture
async def seeded_store(memory_store: InMemoryTripStore) -> InMemoryTripStore:
    """Three-day Kyoto trip for USER_ID plus a one-day trip for OTHER_USER_ID.

    Days: day-1 (Apr 10), day-2 (Apr 11), day-3 (Apr 12). Stops on day-2, in order:
    Fushimi Inari, Gallery Visit, Nishiki Market.
    """
    await memory_store.create_trip(
        USER_ID,
        "Kyoto Spring",
        start_date=date(2025, 4, 10),
        end_date=date(2025, 4, 12),
        trip_id="trip-1",
        day_ids=["day-1", "day-2", "day-3"],
    )
    await memory_store.create_trip(
        OTHER_USER_ID,
        "Someone Else's Trip",
        start_date=date(2025, 6, 1),
        trip_id="trip-other",
        day_ids=["day-other"],
    )
    await seed_stops(memory_store, "day-2", ["Fushimi Inari", "Gallery Visit", "Nishiki Market"])
    return memory_store


async def seed_stops(
    store: InMemoryTripStore | SqlTripStore, day_id: str, names: list[str]
) -> list[str]:
    """Append named stops to a day and return their ids in order."""
    ids = []
    for index, name in enumerate(names):
        record = await store.add_destination(day_id, DestinationInput(name=name), index)
        ids.append(record.id)
    return ids


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine_from_settings(
        Settings(database_url="sqlite+aiosqlite:///:memory:", _env_file=None)  # type: ignore[call-arg]
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(sqlite_engine)


@pytest.fixture
def sql_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlTripStore:
    return SqlTripStore(session_factory)


@pytest.fixture
def sql_sink(session_factory: async_sessionmaker[AsyncSession]) -> SqlLogSink:
    return SqlLogSink(session_factory)
