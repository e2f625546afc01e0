"""SQLAlchemy metadata registry import for Alembic."""

from graphmerge.models import (
    Activity,
    Commitment,
    DismissedMergeSuggestion,
    Entity,
    EntityEvent,
    EntityFact,
    EntityIdentifier,
    EntityMergeAudit,
    EntityRelation,
    EntityRelationMember,
    EntityRelationshipProfile,
    GroupMembership,
    InteractionParticipant,
    Message,
    PendingEntityResolution,
    TranscriptSegment,
)
from graphmerge.models.base import Base

__all__ = [
    "Base",
    "Activity",
    "Commitment",
    "DismissedMergeSuggestion",
    "Entity",
    "EntityEvent",
    "EntityFact",
    "EntityIdentifier",
    "EntityMergeAudit",
    "EntityRelation",
    "EntityRelationMember",
    "EntityRelationshipProfile",
    "GroupMembership",
    "InteractionParticipant",
    "Message",
    "PendingEntityResolution",
    "TranscriptSegment",
]
