"""User Schemas — wire shape of the users collection.

Invariants:
    - Serialized with the persisted field name displayName

Design Decisions:
    - populate_by_name: handlers build responses from snake_case domain values
"""

from pydantic import BaseModel, ConfigDict, Field

from taskboard.core.domain_types import User


class UserResponse(BaseModel):
    """Public user representation."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(alias="displayName")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, display_name=user.display_name)


class MessageResponse(BaseModel):
    """Acknowledgement for operations that return no entity."""
    message: str
