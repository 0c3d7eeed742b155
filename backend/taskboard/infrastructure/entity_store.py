"""SQL Entity Store — EntityStore implementation over SQLAlchemy async sessions.

Invariants:
    - One short-lived session and one commit per store call: every call is its own transaction
    - update_if_version is a single UPDATE ... WHERE id = :id AND version = :expected;
      it succeeded iff exactly one row matched
    - Every write sets version = version + 1 in the same statement
    - stream() reads a point-in-time snapshot with one SELECT, then yields lazily

Design Decisions:
    - Collection → ORM model map instead of a generic documents table: typed columns,
      create_all builds a readable schema (ADR: one file per entity)
    - Document.data carries only the model's __document_fields__; id/version travel separately
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import delete, select, update

from taskboard.core.domain_types import Collection, Document
from taskboard.db.base import Base
from taskboard.infrastructure.database import DatabaseSessionManager
from taskboard.models.task import TaskRecord
from taskboard.models.user import UserRecord, new_document_id

logger = logging.getLogger(__name__)

_MODELS: dict[Collection, type[Base]] = {
    Collection.USERS: UserRecord,
    Collection.TASKS: TaskRecord,
}


def _model_for(collection: Collection) -> type:
    return _MODELS[Collection(collection)]


def _check_fields(model: type, fields: dict[str, Any]) -> None:
    unknown = set(fields) - set(model.__document_fields__)
    if unknown:
        raise ValueError(
            f"{model.__tablename__} has no writable field(s): {sorted(unknown)}",
        )


def _to_document(record: Any) -> Document:
    return Document(
        id=record.id,
        data={name: getattr(record, name) for name in record.__document_fields__},
        version=record.version,
    )


class SqlEntityStore:
    """Document-style access to the users and tasks tables."""

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def create(self, collection: Collection, data: dict[str, Any]) -> Document:
        model = _model_for(collection)
        _check_fields(model, data)
        record = model(id=new_document_id(), version=1, **data)
        async with self.db.session() as session:
            session.add(record)
            await session.commit()
        logger.debug(
            f"Created {model.__tablename__} document {record.id}",
            extra={"collection": model.__tablename__},
        )
        return _to_document(record)

    async def get(self, collection: Collection, doc_id: str) -> Document | None:
        model = _model_for(collection)
        async with self.db.session() as session:
            result = await session.execute(
                select(model).where(model.id == doc_id),
            )
            record = result.scalar_one_or_none()
        return _to_document(record) if record else None

    async def update(
        self, collection: Collection, doc_id: str, fields: dict[str, Any],
    ) -> bool:
        model = _model_for(collection)
        _check_fields(model, fields)
        stmt = (
            update(model)
            .where(model.id == doc_id)
            .values(**fields, version=model.version + 1)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_write(stmt)

    async def update_if_version(
        self,
        collection: Collection,
        doc_id: str,
        fields: dict[str, Any],
        expected_version: int,
    ) -> bool:
        model = _model_for(collection)
        _check_fields(model, fields)
        stmt = (
            update(model)
            .where(model.id == doc_id, model.version == expected_version)
            .values(**fields, version=model.version + 1)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_write(stmt)

    async def delete(self, collection: Collection, doc_id: str) -> bool:
        model = _model_for(collection)
        stmt = (
            delete(model)
            .where(model.id == doc_id)
            .execution_options(synchronize_session=False)
        )
        return await self._execute_write(stmt)

    async def stream(self, collection: Collection) -> AsyncIterator[Document]:
        model = _model_for(collection)
        async with self.db.session() as session:
            result = await session.execute(
                select(model).order_by(model.created_at, model.id),
            )
            snapshot = [_to_document(r) for r in result.scalars().all()]
        for doc in snapshot:
            yield doc

    async def ping(self) -> bool:
        return await self.db.health_check()

    async def _execute_write(self, stmt) -> bool:
        async with self.db.session() as session:
            result = await session.execute(stmt)
            matched = result.rowcount
            await session.commit()
        return matched == 1
