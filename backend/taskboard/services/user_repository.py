"""User Repository — CRUD over the users collection.

Invariants:
    - Names are validated (non-blank) before any store call
    - Missing ids surface as UserNotFoundError, never as None
    - delete_user does not touch tasks that reference the user (references stay dangling)

Design Decisions:
    - list_users is an async generator over one store snapshot; calling it again restarts
      with a fresh snapshot
"""

import logging
from collections.abc import AsyncIterator

from taskboard.core.domain_types import Collection, User
from taskboard.core.enforce_membership import require_text
from taskboard.core.errors import UserNotFoundError
from taskboard.core.repository_protocols import EntityStore

logger = logging.getLogger(__name__)


class UserRepository:
    """Create, read, rename and delete users."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def create_user(self, display_name: str) -> User:
        name = require_text(display_name, "display_name")
        doc = await self.store.create(Collection.USERS, {"display_name": name})
        logger.info(f"User created: {doc.id}", extra={"user_id": doc.id})
        return User.from_document(doc)

    async def get_user(self, user_id: str) -> User:
        doc = await self.store.get(Collection.USERS, user_id)
        if doc is None:
            raise UserNotFoundError(user_id)
        return User.from_document(doc)

    async def user_exists(self, user_id: str) -> bool:
        return await self.store.get(Collection.USERS, user_id) is not None

    async def rename_user(self, user_id: str, new_name: str) -> None:
        name = require_text(new_name, "display_name")
        updated = await self.store.update(
            Collection.USERS, user_id, {"display_name": name},
        )
        if not updated:
            raise UserNotFoundError(user_id)
        logger.info(f"User renamed: {user_id}", extra={"user_id": user_id})

    async def delete_user(self, user_id: str) -> None:
        if not await self.store.delete(Collection.USERS, user_id):
            raise UserNotFoundError(user_id)
        logger.info(f"User deleted: {user_id}", extra={"user_id": user_id})

    async def list_users(self) -> AsyncIterator[User]:
        async for doc in self.store.stream(Collection.USERS):
            yield User.from_document(doc)
