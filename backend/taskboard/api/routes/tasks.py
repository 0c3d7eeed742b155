"""Task Routes — task creation, reads and membership under /tasks.

Invariants:
    - Membership changes go through TaskMembershipService only (never a direct store write)
    - Error taxonomy → HTTP status handled by the global TaskboardError handler:
      400 invalid input, 404 unknown task/user, 409 conflict, 504 timeout, 503 store failure
"""

from fastapi import APIRouter, Depends, status

from taskboard.api.dependencies import get_membership_service
from taskboard.schemas.task import TaskCreate, TaskResponse
from taskboard.services.task_membership import TaskMembershipService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    tasks: TaskMembershipService = Depends(get_membership_service),
):
    """List every task (store-defined order)."""
    return [TaskResponse.from_domain(t) async for t in tasks.list_tasks()]


@router.post(
    "", response_model=TaskResponse, status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate,
    tasks: TaskMembershipService = Depends(get_membership_service),
):
    """Create a task with an empty member list."""
    return TaskResponse.from_domain(await tasks.create_task(body.name))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    tasks: TaskMembershipService = Depends(get_membership_service),
):
    """Fetch one task by id."""
    return TaskResponse.from_domain(await tasks.get_task(task_id))


@router.post("/{task_id}/{member_id}", response_model=TaskResponse)
async def add_member(
    task_id: str,
    member_id: str,
    tasks: TaskMembershipService = Depends(get_membership_service),
):
    """Add a user to the task's members. Adding an existing member is a no-op."""
    return TaskResponse.from_domain(await tasks.add_member(task_id, member_id))


@router.delete("/{task_id}/{member_id}", response_model=TaskResponse)
async def remove_member(
    task_id: str,
    member_id: str,
    tasks: TaskMembershipService = Depends(get_membership_service),
):
    """Remove a user from the task's members. Removing a non-member is a no-op."""
    return TaskResponse.from_domain(await tasks.remove_member(task_id, member_id))
