"""User Routes — CRUD over /users.

Invariants:
    - Missing query parameters are rejected by FastAPI validation (400 via global handler)
    - Domain errors propagate to the global TaskboardError handler, except PATCH,
      which reports an unknown id as 400 like any other bad rename request

Design Decisions:
    - POST/PATCH keep the query-string contract (?username=, ?id=)
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from taskboard.api.dependencies import get_user_repository
from taskboard.core.errors import UserNotFoundError
from taskboard.schemas.user import MessageResponse, UserResponse
from taskboard.services.user_repository import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(users: UserRepository = Depends(get_user_repository)):
    """List every user (store-defined order)."""
    return [UserResponse.from_domain(u) async for u in users.list_users()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str, users: UserRepository = Depends(get_user_repository),
):
    """Fetch one user by id."""
    return UserResponse.from_domain(await users.get_user(user_id))


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    username: str = Query(..., max_length=200),
    users: UserRepository = Depends(get_user_repository),
):
    """Create a user named by the username query parameter."""
    return UserResponse.from_domain(await users.create_user(username))


@router.patch("", response_model=MessageResponse)
async def rename_user(
    user_id: str = Query(..., alias="id"),
    username: str = Query(..., max_length=200),
    users: UserRepository = Depends(get_user_repository),
):
    """Rename a user in place."""
    try:
        await users.rename_user(user_id, username)
    except UserNotFoundError as e:
        logger.warning(
            f"Rename rejected: {e.message}", extra={"user_id": user_id},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=e.to_response(),
        )
    return MessageResponse(message="User name changed")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str, users: UserRepository = Depends(get_user_repository),
):
    """Delete a user. Task member lists are left as they are."""
    await users.delete_user(user_id)
    return MessageResponse(message="User deleted")
