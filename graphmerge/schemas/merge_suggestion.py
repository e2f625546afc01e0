"""Schemas for duplicate-entity merge suggestions."""

from datetime import datetime

from pydantic import BaseModel, Field

from graphmerge.schemas.entity import EntityIdentifierRead


class MergeSuggestionPrimary(BaseModel):
    """Already-resolved entity that candidates would be merged into."""

    id: int
    name: str
    type: str
    profile_photo: str | None = None
    identifiers: list[EntityIdentifierRead] = Field(default_factory=list)


class MergeSuggestionCandidate(BaseModel):
    """Probable duplicate of the group's primary entity."""

    id: int
    name: str
    matched_value: str
    created_at: datetime
    message_count: int = 0
    reason: str


class MergeSuggestionGroup(BaseModel):
    """Candidates grouped under one primary entity."""

    primary_entity: MergeSuggestionPrimary
    candidates: list[MergeSuggestionCandidate]
    reason: str


class MergeSuggestionsResponse(BaseModel):
    """Paginated merge suggestion groups; ``total`` counts distinct primary entities."""

    groups: list[MergeSuggestionGroup]
    total: int
    limit: int
    offset: int


class DismissResult(BaseModel):
    """Dismiss endpoint payload."""

    primary_entity_id: int
    dismissed_entity_id: int
    created: bool
