"""ORM models package exports."""

from graphmerge.models.activity import Activity
from graphmerge.models.commitment import Commitment
from graphmerge.models.dismissed_merge_suggestion import DismissedMergeSuggestion
from graphmerge.models.entity import Entity
from graphmerge.models.entity_event import EntityEvent
from graphmerge.models.entity_fact import EntityFact
from graphmerge.models.entity_identifier import EntityIdentifier
from graphmerge.models.entity_merge_audit import EntityMergeAudit
from graphmerge.models.entity_relation import EntityRelation, EntityRelationMember
from graphmerge.models.entity_relationship_profile import EntityRelationshipProfile
from graphmerge.models.group_membership import GroupMembership
from graphmerge.models.interaction_participant import InteractionParticipant
from graphmerge.models.message import Message
from graphmerge.models.pending_entity_resolution import PendingEntityResolution
from graphmerge.models.transcript_segment import TranscriptSegment

__all__ = [
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
