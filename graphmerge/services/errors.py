"""Domain errors raised by the merge services."""

from __future__ import annotations


class MergeEngineError(Exception):
    """Base class for merge engine failures surfaced to callers."""


class EntityNotFoundError(MergeEngineError):
    """An entity id does not resolve to a live entity."""

    def __init__(self, entity_id: int, role: str = "Entity") -> None:
        super().__init__(f"{role} entity {entity_id} not found")
        self.entity_id = entity_id
        self.role = role


class MergeConflictError(MergeEngineError):
    """The requested operation is invalid for the current graph state."""
