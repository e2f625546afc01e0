"""Atomic consolidation of a duplicate entity into its surviving twin."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, exists, or_, select, update
from sqlalchemy.orm import Session, aliased

from graphmerge.models.activity import Activity
from graphmerge.models.base import Base
from graphmerge.models.commitment import Commitment
from graphmerge.models.entity import Entity
from graphmerge.models.entity_event import EntityEvent
from graphmerge.models.entity_fact import EntityFact
from graphmerge.models.entity_identifier import EntityIdentifier
from graphmerge.models.entity_merge_audit import EntityMergeAudit
from graphmerge.models.entity_relation import EntityRelationMember
from graphmerge.models.entity_relationship_profile import EntityRelationshipProfile
from graphmerge.models.group_membership import GroupMembership
from graphmerge.models.interaction_participant import InteractionParticipant
from graphmerge.models.message import Message
from graphmerge.models.pending_entity_resolution import PendingEntityResolution
from graphmerge.models.transcript_segment import TranscriptSegment
from graphmerge.schemas.merge import MergeRequest, MergeResult
from graphmerge.services.entity_stats import get_live_entity
from graphmerge.services.errors import EntityNotFoundError, MergeConflictError
from graphmerge.services.merge_dismissals import delete_dismissals_for_entity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntityReference:
    """Column pointing at an entity that a merge must re-point.

    ``unique_by`` lists the sibling columns that, together with ``column``,
    form a uniqueness key. Source rows duplicating a target row on that key
    are deleted before the remaining rows are moved.
    """

    model: type[Base]
    column: str
    unique_by: tuple[str, ...] = ()


DEPENDENT_REFERENCES: tuple[EntityReference, ...] = (
    EntityReference(EntityRelationMember, "entity_id", ("relation_id", "role")),
    EntityReference(InteractionParticipant, "entity_id", ("interaction_id",)),
    EntityReference(GroupMembership, "entity_id", ("chat_id",)),
    EntityReference(Message, "sender_entity_id"),
    EntityReference(Message, "recipient_entity_id"),
    EntityReference(Activity, "owner_entity_id"),
    EntityReference(Activity, "client_entity_id"),
    EntityReference(Commitment, "from_entity_id"),
    EntityReference(Commitment, "to_entity_id"),
    EntityReference(EntityEvent, "entity_id"),
    EntityReference(EntityEvent, "related_entity_id"),
    EntityReference(TranscriptSegment, "speaker_entity_id"),
    EntityReference(PendingEntityResolution, "resolved_entity_id"),
    EntityReference(Entity, "merged_into_id"),
)


def merge_entities(db: Session, payload: MergeRequest) -> MergeResult:
    """Merge ``payload.source_id`` into ``payload.target_id`` in one transaction.

    Preconditions are validated before anything is written. Any failure while
    merging rolls the session back, is logged with both ids, and is re-raised
    unchanged.
    """

    source_id = payload.source_id
    target_id = payload.target_id

    source = db.scalar(select(Entity).where(Entity.id == source_id))
    if source is None:
        raise EntityNotFoundError(source_id, role="Source")
    target = get_live_entity(db, target_id)
    if target is None:
        raise EntityNotFoundError(target_id, role="Target")
    if source_id == target_id:
        raise MergeConflictError("Cannot merge entity with itself")
    if source.deleted_at is not None:
        if source.merged_into_id is not None:
            raise MergeConflictError(
                f"Source entity {source_id} was already merged into entity {source.merged_into_id}"
            )
        raise MergeConflictError(f"Source entity {source_id} is deleted")

    try:
        result = _execute_merge(db, source, target, payload)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("entity_merge.failed source_id=%s target_id=%s", source_id, target_id)
        raise

    logger.info(
        "entity_merge.completed source_id=%s target_id=%s identifiers_moved=%d facts_moved=%d audit_id=%s",
        source_id,
        target_id,
        result.identifiers_moved,
        result.facts_moved,
        result.audit_id,
    )
    return result


def list_entity_merge_audits(db: Session, entity_id: int) -> list[EntityMergeAudit]:
    """List merges in which the entity was the source or the target."""

    stmt = (
        select(EntityMergeAudit)
        .where(
            or_(
                EntityMergeAudit.source_entity_id == entity_id,
                EntityMergeAudit.target_entity_id == entity_id,
            )
        )
        .order_by(EntityMergeAudit.id.asc())
    )
    return list(db.scalars(stmt).all())


def _execute_merge(db: Session, source: Entity, target: Entity, payload: MergeRequest) -> MergeResult:
    details: dict[str, object] = {}

    identifiers_moved = _move_identifiers(db, source.id, target.id, payload, details)
    facts_moved = _move_facts(db, source.id, target.id, payload, details)
    details["revived_target_memberships"] = _revive_target_memberships(db, source.id, target.id)
    details["references"] = _repoint_dependent_references(db, source.id, target.id)
    details["dismissals_removed"] = delete_dismissals_for_entity(db, source.id)
    _drop_relationship_profile(db, source.id)
    _discard_leftovers(db, source.id, details)
    _retire_source(source, target.id)

    audit = EntityMergeAudit(
        source_entity_id=source.id,
        target_entity_id=target.id,
        identifiers_moved=identifiers_moved,
        facts_moved=facts_moved,
        resolutions_json=[choice.model_dump() for choice in payload.conflict_resolutions],
        details_json=details,
        merged_by=payload.merged_by,
    )
    db.add(audit)
    db.flush()

    return MergeResult(
        merged_entity_id=target.id,
        source_entity_deleted=True,
        identifiers_moved=identifiers_moved,
        facts_moved=facts_moved,
        audit_id=audit.id,
    )


def _move_identifiers(
    db: Session,
    source_id: int,
    target_id: int,
    payload: MergeRequest,
    details: dict[str, object],
) -> int:
    requested = set(payload.include_identifier_ids)
    source_identifiers = db.scalars(
        select(EntityIdentifier)
        .where(EntityIdentifier.entity_id == source_id)
        .order_by(EntityIdentifier.id.asc())
    ).all()
    target_by_type = {
        row.identifier_type: row
        for row in db.scalars(select(EntityIdentifier).where(EntityIdentifier.entity_id == target_id)).all()
    }

    moved: list[dict[str, object]] = []
    replaced: list[dict[str, object]] = []
    moved_count = 0
    for identifier in source_identifiers:
        if identifier.id not in requested:
            continue
        existing = target_by_type.get(identifier.identifier_type)
        if existing is not None:
            # keep_both cannot hold two identifiers of one type on an entity; it keeps the target's.
            resolution = payload.resolution_for("identifier", identifier.identifier_type) or "keep_target"
            if resolution != "keep_source":
                continue
            replaced.append(_identifier_snapshot(existing))
            db.execute(delete(EntityIdentifier).where(EntityIdentifier.id == existing.id))

        db.execute(
            update(EntityIdentifier).where(EntityIdentifier.id == identifier.id).values(entity_id=target_id)
        )
        target_by_type[identifier.identifier_type] = identifier
        moved.append(_identifier_snapshot(identifier))
        moved_count += 1

    details["moved_identifiers"] = moved
    details["replaced_target_identifiers"] = replaced
    return moved_count


def _move_facts(
    db: Session,
    source_id: int,
    target_id: int,
    payload: MergeRequest,
    details: dict[str, object],
) -> int:
    requested = set(payload.include_fact_ids)
    source_facts = db.scalars(
        select(EntityFact).where(EntityFact.entity_id == source_id).order_by(EntityFact.id.asc())
    ).all()
    target_current: dict[str, list[int]] = defaultdict(list)
    for row in db.scalars(
        select(EntityFact).where(EntityFact.entity_id == target_id, EntityFact.valid_until.is_(None))
    ).all():
        target_current[row.fact_type].append(row.id)

    moved: list[dict[str, object]] = []
    historicized: list[int] = []
    moved_count = 0
    now = datetime.now(timezone.utc)
    for fact in source_facts:
        if fact.id not in requested:
            continue
        if fact.valid_until is None:
            existing_ids = target_current.get(fact.fact_type, [])
            if existing_ids:
                resolution = payload.resolution_for("fact", fact.fact_type) or "keep_target"
                if resolution == "keep_target":
                    continue
                db.execute(update(EntityFact).where(EntityFact.id.in_(existing_ids)).values(valid_until=now))
                historicized.extend(existing_ids)
            target_current[fact.fact_type] = [fact.id]

        db.execute(update(EntityFact).where(EntityFact.id == fact.id).values(entity_id=target_id))
        moved.append({"id": fact.id, "fact_type": fact.fact_type, "value": fact.value})
        moved_count += 1

    details["moved_facts"] = moved
    details["historicized_target_fact_ids"] = historicized
    return moved_count


def _revive_target_memberships(db: Session, source_id: int, target_id: int) -> list[dict[str, object]]:
    """Reopen historical target memberships that the source still holds as current.

    The source row is then dropped as a duplicate of the target row, so the
    target keeps the current membership instead of losing it.
    """

    held = aliased(EntityRelationMember)
    source_is_current = exists().where(
        held.entity_id == source_id,
        held.relation_id == EntityRelationMember.relation_id,
        held.role == EntityRelationMember.role,
        held.valid_until.is_(None),
    )
    rows = db.execute(
        select(EntityRelationMember.relation_id, EntityRelationMember.role)
        .where(
            EntityRelationMember.entity_id == target_id,
            EntityRelationMember.valid_until.is_not(None),
            source_is_current,
        )
        .order_by(EntityRelationMember.relation_id.asc(), EntityRelationMember.role.asc())
    ).all()
    for relation_id, role in rows:
        db.execute(
            update(EntityRelationMember)
            .where(
                EntityRelationMember.entity_id == target_id,
                EntityRelationMember.relation_id == relation_id,
                EntityRelationMember.role == role,
            )
            .values(valid_until=None)
            .execution_options(synchronize_session=False)
        )
    return [{"relation_id": relation_id, "role": role} for relation_id, role in rows]


def _repoint_dependent_references(db: Session, source_id: int, target_id: int) -> dict[str, int]:
    counts: dict[str, int] = {}
    for reference in DEPENDENT_REFERENCES:
        column = getattr(reference.model, reference.column)
        key = f"{reference.model.__tablename__}.{reference.column}"
        if reference.unique_by:
            held = aliased(reference.model)
            duplicate_on_target = exists().where(
                getattr(held, reference.column) == target_id,
                *(getattr(held, name) == getattr(reference.model, name) for name in reference.unique_by),
            )
            removed = db.execute(
                delete(reference.model)
                .where(column == source_id, duplicate_on_target)
                .execution_options(synchronize_session=False)
            )
            counts[f"{key}:deleted"] = int(removed.rowcount or 0)
        moved = db.execute(
            update(reference.model)
            .where(column == source_id)
            .values({reference.column: target_id})
            .execution_options(synchronize_session=False)
        )
        counts[key] = int(moved.rowcount or 0)
    return counts


def _drop_relationship_profile(db: Session, source_id: int) -> None:
    db.execute(
        delete(EntityRelationshipProfile)
        .where(EntityRelationshipProfile.entity_id == source_id)
        .execution_options(synchronize_session=False)
    )


def _discard_leftovers(db: Session, source_id: int, details: dict[str, object]) -> None:
    """Delete identifiers and facts left on the source, keeping their values in the audit."""

    identifiers = db.scalars(select(EntityIdentifier).where(EntityIdentifier.entity_id == source_id)).all()
    facts = db.scalars(select(EntityFact).where(EntityFact.entity_id == source_id)).all()
    details["discarded_identifiers"] = [_identifier_snapshot(row) for row in identifiers]
    details["discarded_facts"] = [
        {"id": row.id, "fact_type": row.fact_type, "value": row.value, "current": row.valid_until is None}
        for row in facts
    ]
    db.execute(delete(EntityIdentifier).where(EntityIdentifier.entity_id == source_id))
    db.execute(delete(EntityFact).where(EntityFact.entity_id == source_id))


def _retire_source(source: Entity, target_id: int) -> None:
    source.deleted_at = datetime.now(timezone.utc)
    source.merged_into_id = target_id


def _identifier_snapshot(identifier: EntityIdentifier) -> dict[str, object]:
    return {
        "id": identifier.id,
        "identifier_type": identifier.identifier_type,
        "identifier_value": identifier.identifier_value,
    }
