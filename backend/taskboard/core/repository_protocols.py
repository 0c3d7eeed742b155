"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - The entity store is reached only through EntityStore; implementations injected by the shell
    - update_if_version is the single serialization point for concurrent writers:
      it commits iff the stored version still equals expected_version, and bumps the version

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance (ADR: ExMA anti-pattern)
    - Async in Protocol: implementations do network IO
    - Unconditional update() also bumps the version, so a rename can never be mistaken for
      "unchanged" by a concurrent conditional writer
"""

from collections.abc import AsyncIterator
from typing import Any, Protocol

from taskboard.core.domain_types import Collection, Document


class EntityStore(Protocol):
    """Document store with per-document optimistic update."""

    async def create(self, collection: Collection, data: dict[str, Any]) -> Document: ...

    async def get(self, collection: Collection, doc_id: str) -> Document | None: ...

    async def update(
        self, collection: Collection, doc_id: str, fields: dict[str, Any],
    ) -> bool: ...

    async def update_if_version(
        self,
        collection: Collection,
        doc_id: str,
        fields: dict[str, Any],
        expected_version: int,
    ) -> bool: ...

    async def delete(self, collection: Collection, doc_id: str) -> bool: ...

    def stream(self, collection: Collection) -> AsyncIterator[Document]: ...

    async def ping(self) -> bool: ...
