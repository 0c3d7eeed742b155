"""Task Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - TaskCreate.name: 1-500 chars; blank names rejected by the service (InvalidInputError)
    - TaskResponse.members preserves stored insertion order
"""

from pydantic import BaseModel, Field

from taskboard.core.domain_types import Task


class TaskCreate(BaseModel):
    """Task creation body."""
    name: str = Field(max_length=500)


class TaskResponse(BaseModel):
    """Public task representation."""
    id: str
    name: str
    members: list[str]

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(id=task.id, name=task.name, members=list(task.members))
