"""Membership Rules — pure validation and member-list transforms.

Invariants:
    - Every function here is PURE: no IO, no store access, no mutation of inputs
    - append_member / drop_member return None when the list is already in the target state;
      the shell reads None as "no write needed" (idempotent add/remove)
    - Appends keep insertion order and never introduce a duplicate

Design Decisions:
    - Blank means empty after str.strip(): "  " is rejected the same as ""
    - require_text raises InvalidInputError directly rather than returning a descriptor:
      callers have nothing to recover at this layer
"""

from taskboard.core.domain_types import UserId
from taskboard.core.errors import InvalidInputError


def require_text(value: str | None, field: str) -> str:
    """Return value stripped, or raise InvalidInputError if it is blank."""
    if value is None or not value.strip():
        raise InvalidInputError(f"{field} must be a non-empty string", field)
    return value.strip()


def require_member_ids(task_id: str | None, user_id: str | None) -> None:
    """Check 1 of add/remove: both ids present. Task id is reported first."""
    require_text(task_id, "task_id")
    require_text(user_id, "user_id")


def append_member(
    members: tuple[UserId, ...], user_id: UserId,
) -> tuple[UserId, ...] | None:
    """Members with user_id appended, or None if it is already a member."""
    if user_id in members:
        return None
    return (*members, user_id)


def drop_member(
    members: tuple[UserId, ...], user_id: UserId,
) -> tuple[UserId, ...] | None:
    """Members without user_id, or None if it was not a member."""
    if user_id not in members:
        return None
    return tuple(m for m in members if m != user_id)
