"""ORM Models — one table per entity-store collection.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every model carries an integer version column used as the optimistic concurrency token

Design Decisions:
    - One file per entity for locality (ADR: ExMA max 3-4 files to understand a feature)
    - All models imported here so Base.metadata is complete before create_all runs
"""

from taskboard.models.user import UserRecord  # noqa: F401
from taskboard.models.task import TaskRecord  # noqa: F401
