"""Route test fixtures — FastAPI test clients over a SQLite store or a scriptable fake.

Invariants:
    - get_entity_store overridden: routes never reach the lifespan-created store
    - client runs against the real SqlEntityStore on in-memory SQLite
    - fake_client runs against InMemoryEntityStore with fast retries and a short deadline
    - Overrides cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from taskboard.api.dependencies import get_entity_store, get_membership_service
from taskboard.main import app
from taskboard.services.task_membership import TaskMembershipService

from tests.services.fake_store import InMemoryEntityStore


@pytest.fixture
async def client(sql_store):
    """FastAPI test client with the entity store overridden."""
    app.dependency_overrides[get_entity_store] = lambda: sql_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def fake_store():
    return InMemoryEntityStore()


@pytest.fixture
async def fake_client(fake_store):
    """Test client over the in-memory store; membership retries don't sleep."""
    app.dependency_overrides[get_entity_store] = lambda: fake_store
    app.dependency_overrides[get_membership_service] = lambda: TaskMembershipService(
        fake_store, max_attempts=3, base_delay_ms=0, default_timeout=0.1,
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
