"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, TaskId wrap opaque store-assigned strings, never parsed or generated by the core
    - User and Task are frozen: every change produces a new value
    - Task.members is a tuple: insertion-ordered, duplicate-free by construction in enforce_membership

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Collection names as a str Enum: the store routes on them, no raw string matching
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
TaskId = NewType("TaskId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Collection(str, Enum):
    """Document collections held by the entity store."""
    USERS = "users"
    TASKS = "tasks"


# ─── Values ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Document:
    """A stored document plus the version token guarding its next write."""
    id: str
    data: dict[str, Any]
    version: int


@dataclass(frozen=True)
class User:
    id: UserId
    display_name: str

    @classmethod
    def from_document(cls, doc: Document) -> "User":
        return cls(id=UserId(doc.id), display_name=doc.data["display_name"])


@dataclass(frozen=True)
class Task:
    id: TaskId
    name: str
    members: tuple[UserId, ...] = field(default_factory=tuple)
    version: int = 1

    @classmethod
    def from_document(cls, doc: Document) -> "Task":
        return cls(
            id=TaskId(doc.id),
            name=doc.data["name"],
            members=tuple(UserId(m) for m in doc.data.get("members") or ()),
            version=doc.version,
        )
