"""Root conftest — shared test configuration and SQLite-backed store fixtures.

Invariants:
    - Every test using test_engine gets a fresh in-memory SQLite database
    - sql_store wraps the test engine in a real SqlEntityStore (no mocks below the store)
    - sql_store is for sequential tests only: the in-memory engine shares one connection
      between sessions, so one session closing rolls back another's uncommitted UPDATE.
      Concurrent writers use file_sql_store, a file database with a connection per session

Design Decisions:
    - SQLite in-memory via aiosqlite: fast, no external dependency, sufficient for store tests
    - DatabaseSessionManager built with __new__: reuses the test engine instead of opening its own
"""

import os

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")

from taskboard.db.base import Base  # noqa: E402
from taskboard.infrastructure.database import DatabaseSessionManager  # noqa: E402
from taskboard.infrastructure.entity_store import SqlEntityStore  # noqa: E402
import taskboard.models  # noqa: E402, F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def db_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def sql_store(db_manager):
    return SqlEntityStore(db_manager)


@pytest.fixture
async def file_sql_store(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'taskboard.db'}",
    )
    await manager.create_schema()
    yield SqlEntityStore(manager)
    await manager.dispose()
