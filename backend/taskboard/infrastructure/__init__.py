"""Infrastructure Layer — entity store implementation and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All SQLAlchemy failures mapped to DatabaseError before leaving this layer

Design Decisions:
    - Store implementation behind core.repository_protocols.EntityStore (ADR: ExMA single responsibility)
"""
