"""Services Layer — repositories and the membership consistency shell.

Invariants:
    - Services depend on the EntityStore protocol, never on SQLAlchemy directly
    - Every failure reaches the caller as a TaskboardError subclass or a propagated store error

Design Decisions:
    - Store passed into every constructor: no ambient client handle (ADR: test doubles)
"""
