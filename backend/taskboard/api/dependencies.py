"""Request Dependencies — hand the process-wide entity store to repositories and services.

Invariants:
    - The store is created once in the lifespan and read from app.state, never from a module global
    - Repositories/services are cheap per-request wrappers around the shared store

Design Decisions:
    - get_entity_store is the single override point for tests (app.dependency_overrides)
"""

from fastapi import Depends, Request

from taskboard.config import Settings, get_settings
from taskboard.core.repository_protocols import EntityStore
from taskboard.services.task_membership import TaskMembershipService
from taskboard.services.user_repository import UserRepository


def get_entity_store(request: Request) -> EntityStore:
    """FastAPI dependency for the shared entity store."""
    store = getattr(request.app.state, "entity_store", None)
    if store is None:
        raise RuntimeError("Entity store not initialized")
    return store


def get_user_repository(
    store: EntityStore = Depends(get_entity_store),
) -> UserRepository:
    return UserRepository(store)


def get_membership_service(
    store: EntityStore = Depends(get_entity_store),
    settings: Settings = Depends(get_settings),
) -> TaskMembershipService:
    return TaskMembershipService(
        store,
        max_attempts=settings.membership_max_attempts,
        base_delay_ms=settings.membership_retry_base_delay_ms,
        max_delay_ms=settings.membership_retry_max_delay_ms,
        default_timeout=settings.membership_timeout_seconds,
    )
