"""Schemas for merge previews and merge execution."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from graphmerge.schemas.common import ConflictResolution, MergeField
from graphmerge.schemas.entity import EntityFactRead, EntityIdentifierRead


class EntityMergeData(BaseModel):
    """Comparable attributes of one side of a merge."""

    id: int
    name: str
    type: str
    identifiers: list[EntityIdentifierRead]
    current_facts: list[EntityFactRead]
    message_count: int
    relation_count: int


class MergeConflict(BaseModel):
    """Field where both entities hold a current, differing value."""

    field: MergeField
    type: str
    source_value: str | None
    target_value: str | None


class MergePreview(BaseModel):
    """Side-by-side merge preview."""

    source: EntityMergeData
    target: EntityMergeData
    conflicts: list[MergeConflict]


class ConflictResolutionChoice(BaseModel):
    """Human decision for one conflicting field."""

    field: MergeField
    type: str = Field(min_length=1)
    resolution: ConflictResolution


class MergeRequest(BaseModel):
    """Merge ``source_id`` into ``target_id`` carrying over the selected rows."""

    source_id: int = Field(ge=1)
    target_id: int = Field(ge=1)
    include_identifier_ids: list[int] = Field(default_factory=list)
    include_fact_ids: list[int] = Field(default_factory=list)
    conflict_resolutions: list[ConflictResolutionChoice] = Field(default_factory=list)
    merged_by: str = Field(default="user", min_length=1, max_length=100)

    @model_validator(mode="after")
    def validate_unique_resolutions(self) -> "MergeRequest":
        seen: set[tuple[str, str]] = set()
        for choice in self.conflict_resolutions:
            key = (choice.field, choice.type)
            if key in seen:
                raise ValueError(f"Duplicate resolution for {choice.field}:{choice.type}.")
            seen.add(key)
        return self

    def resolution_for(self, field: str, type_: str) -> str | None:
        for choice in self.conflict_resolutions:
            if choice.field == field and choice.type == type_:
                return choice.resolution
        return None


class MergeResult(BaseModel):
    """Outcome of an executed merge."""

    merged_entity_id: int
    source_entity_deleted: bool
    identifiers_moved: int
    facts_moved: int
    audit_id: int
