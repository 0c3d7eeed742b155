"""Task Membership Service — keeps task member lists valid under concurrent writers.

Invariants:
    - add_member check order: ids non-blank → task exists → user exists → already member (no-op)
    - User existence is re-checked on every attempt, against the store state current at that attempt
    - The only write is update_if_version guarded by the version read in the same attempt:
      a lost race never overwrites another writer's members
    - Attempts are bounded (max_attempts); exhaustion raises ConcurrentUpdateConflictError
    - A deadline bounds every store read and every backoff sleep; expiry raises OperationTimeoutError
    - Writes (the conditional update, the task insert) are never cancelled: the deadline is
      checked before them, so a 504 always means nothing was written

Design Decisions:
    - Optimistic concurrency over in-process locks: the store is the only serialization point,
      so the protocol also holds across worker processes
    - remove_member skips the user existence check so references left dangling by a deleted
      user can still be cleaned up
    - Exponential backoff with ±25% jitter between attempts: contending writers spread out
      instead of colliding again on the same beat
"""

import asyncio
import logging
import random
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import replace
from typing import TypeVar

from taskboard.core.domain_types import Collection, Task, UserId
from taskboard.core.enforce_membership import (
    append_member, drop_member, require_member_ids, require_text,
)
from taskboard.core.errors import (
    ConcurrentUpdateConflictError,
    ErrorContext,
    OperationTimeoutError,
    TaskNotFoundError,
    UserNotFoundError,
)
from taskboard.core.repository_protocols import EntityStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

MembersTransform = Callable[
    [tuple[UserId, ...], UserId], tuple[UserId, ...] | None,
]


class Deadline:
    """Monotonic deadline shared by every step of one operation."""

    def __init__(self, operation: str, timeout: float | None):
        self.operation = operation
        self.timeout = timeout
        self._expires_at = (
            None if timeout is None else time.monotonic() + timeout
        )

    def remaining(self, context: ErrorContext | None = None) -> float | None:
        """Seconds left, None when unbounded. Raises once expired."""
        if self._expires_at is None:
            return None
        left = self._expires_at - time.monotonic()
        if left <= 0:
            raise OperationTimeoutError(self.operation, self.timeout, context)
        return left

    def expired(self) -> bool:
        return (
            self._expires_at is not None
            and time.monotonic() >= self._expires_at
        )

    async def run(
        self,
        call: Callable[..., Awaitable[T]],
        *args,
        context: ErrorContext | None = None,
    ) -> T:
        """Await call(*args) within the time left.

        Only expiry of this deadline becomes OperationTimeoutError; a timeout
        raised by the call itself (e.g. a driver connect timeout) propagates.
        """
        remaining = self.remaining(context)
        try:
            return await asyncio.wait_for(call(*args), remaining)
        except asyncio.TimeoutError:
            if not self.expired():
                raise
            raise OperationTimeoutError(
                self.operation, self.timeout, context,
            ) from None


class TaskMembershipService:
    """Task creation, reads, and consistent add/remove of members."""

    def __init__(
        self,
        store: EntityStore,
        max_attempts: int = 5,
        base_delay_ms: int = 20,
        max_delay_ms: int = 500,
        default_timeout: float | None = None,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.default_timeout = default_timeout

    # ─── Tasks ───────────────────────────────────────────────────

    async def create_task(self, name: str, timeout: float | None = None) -> Task:
        task_name = require_text(name, "name")
        deadline = self._deadline("create_task", timeout)
        # Checked before the insert only: a cancelled insert may still have committed
        deadline.remaining()
        doc = await self.store.create(
            Collection.TASKS, {"name": task_name, "members": []},
        )
        logger.info(f"Task created: {doc.id}", extra={"task_id": doc.id})
        return Task.from_document(doc)

    async def get_task(self, task_id: str, timeout: float | None = None) -> Task:
        deadline = self._deadline("get_task", timeout)
        doc = await deadline.run(self.store.get, Collection.TASKS, task_id)
        if doc is None:
            raise TaskNotFoundError(task_id)
        return Task.from_document(doc)

    async def list_tasks(self) -> AsyncIterator[Task]:
        async for doc in self.store.stream(Collection.TASKS):
            yield Task.from_document(doc)

    # ─── Membership ──────────────────────────────────────────────

    async def add_member(
        self, task_id: str, user_id: str, timeout: float | None = None,
    ) -> Task:
        """Append user_id to the task's members. Idempotent."""
        return await self._apply(
            "add_member", task_id, user_id, append_member,
            require_user=True, timeout=timeout,
        )

    async def remove_member(
        self, task_id: str, user_id: str, timeout: float | None = None,
    ) -> Task:
        """Remove user_id from the task's members. Idempotent."""
        return await self._apply(
            "remove_member", task_id, user_id, drop_member,
            require_user=False, timeout=timeout,
        )

    async def _apply(
        self,
        operation: str,
        task_id: str,
        user_id: str,
        transform: MembersTransform,
        *,
        require_user: bool,
        timeout: float | None,
    ) -> Task:
        """Optimistic read-validate-conditional-write loop shared by add/remove."""
        require_member_ids(task_id, user_id)
        deadline = self._deadline(operation, timeout)
        member = UserId(user_id)

        for attempt in range(1, self.max_attempts + 1):
            ctx = ErrorContext(task_id=task_id, user_id=user_id, attempt=attempt)
            doc = await deadline.run(
                self.store.get, Collection.TASKS, task_id, context=ctx,
            )
            if doc is None:
                raise TaskNotFoundError(task_id, ctx)
            task = Task.from_document(doc)

            if require_user:
                user_doc = await deadline.run(
                    self.store.get, Collection.USERS, user_id, context=ctx,
                )
                if user_doc is None:
                    raise UserNotFoundError(user_id, ctx)

            members = transform(task.members, member)
            if members is None:
                return task

            deadline.remaining(ctx)
            committed = await self.store.update_if_version(
                Collection.TASKS, task_id,
                {"members": list(members)}, task.version,
            )
            if committed:
                logger.info(
                    f"{operation} committed on task {task_id}",
                    extra={
                        "task_id": task_id, "user_id": user_id,
                        "operation": operation, "attempt": attempt,
                    },
                )
                return replace(task, members=members, version=task.version + 1)

            logger.info(
                f"{operation} lost a concurrent write on task {task_id}",
                extra={
                    "task_id": task_id, "user_id": user_id,
                    "operation": operation, "attempt": attempt,
                },
            )
            if attempt < self.max_attempts:
                await self._backoff(attempt, deadline, ctx)

        logger.warning(
            f"{operation} gave up on task {task_id} after {self.max_attempts} attempts",
            extra={
                "task_id": task_id, "user_id": user_id,
                "operation": operation,
                "attempt": self.max_attempts,
                "error_code": "CONCURRENT_UPDATE_CONFLICT",
            },
        )
        raise ConcurrentUpdateConflictError(task_id, self.max_attempts)

    def _deadline(self, operation: str, timeout: float | None) -> Deadline:
        return Deadline(
            operation, timeout if timeout is not None else self.default_timeout,
        )

    async def _backoff(
        self, attempt: int, deadline: Deadline, ctx: ErrorContext,
    ) -> None:
        """Exponential backoff with ±25% jitter, clipped to the deadline."""
        delay_ms = min(
            self.base_delay_ms * 2 ** (attempt - 1), self.max_delay_ms,
        )
        delay = delay_ms * random.uniform(0.75, 1.25) / 1000
        remaining = deadline.remaining(ctx)
        if remaining is not None:
            delay = min(delay, remaining)
        await asyncio.sleep(delay)
