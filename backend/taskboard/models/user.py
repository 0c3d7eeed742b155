"""User ORM — persists the users collection.

Invariants:
    - id is an opaque 32-char hex string assigned on insert, never updated
    - display_name is non-nullable text
    - version starts at 1 and is bumped by every write

Design Decisions:
    - String primary key instead of UUID column: ids are opaque to clients and the core
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.db.base import Base


def new_document_id() -> str:
    return uuid.uuid4().hex


class UserRecord(Base):
    """Row in the users collection."""
    __tablename__ = "users"
    __document_fields__ = ("display_name",)

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_document_id,
    )
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
