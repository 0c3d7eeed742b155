"""Task ORM — persists the tasks collection with its member list.

Invariants:
    - name is set on insert and never updated
    - members is a JSON array of user ids, written only through conditional updates
    - version starts at 1 and is bumped by every write

Design Decisions:
    - JSON column for members: the list is read and written as one document field,
      as a document store does (ADR: no join table, no per-member rows)
    - No foreign keys from members to users: referential validity is checked at add-time
      by the membership service, and deleting a user leaves references in place
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.db.base import Base
from taskboard.models.user import new_document_id


class TaskRecord(Base):
    """Row in the tasks collection."""
    __tablename__ = "tasks"
    __document_fields__ = ("name", "members")

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_document_id,
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    members: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
