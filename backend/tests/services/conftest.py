"""Service test fixtures — in-memory store, repository and membership service.

Invariants:
    - Every test gets a fresh InMemoryEntityStore
    - Backoff base delay is 0: retry tests run without sleeping
    - No default deadline: timeout tests pass one explicitly
"""

import pytest

from taskboard.core.domain_types import Collection
from taskboard.services.task_membership import TaskMembershipService
from taskboard.services.user_repository import UserRepository

from tests.services.fake_store import InMemoryEntityStore


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def users(store):
    return UserRepository(store)


@pytest.fixture
def service(store):
    return TaskMembershipService(store, max_attempts=5, base_delay_ms=0)


@pytest.fixture
def alice(store):
    store.seed(Collection.USERS, "U1", {"display_name": "alice"})
    return "U1"


@pytest.fixture
def bob(store):
    store.seed(Collection.USERS, "U2", {"display_name": "bob"})
    return "U2"


@pytest.fixture
def launch(store):
    store.seed(Collection.TASKS, "T1", {"name": "launch", "members": []})
    return "T1"
