"""Batched per-entity lookups shared by suggestion listing and merge previews."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection

from sqlalchemy import func, select, union
from sqlalchemy.orm import Session

from graphmerge.models.entity import Entity
from graphmerge.models.entity_identifier import EntityIdentifier
from graphmerge.models.entity_relation import EntityRelationMember
from graphmerge.models.message import Message
from graphmerge.schemas.entity import EntityIdentifierRead


def get_live_entity(db: Session, entity_id: int) -> Entity | None:
    """Return the entity when it exists and is not soft-deleted."""

    return db.scalar(select(Entity).where(Entity.id == entity_id, Entity.deleted_at.is_(None)))


def get_message_counts(db: Session, entity_ids: Collection[int]) -> dict[int, int]:
    """Count distinct messages each entity sent or received, in one query."""

    if not entity_ids:
        return {}
    ids = list(entity_ids)
    participation = union(
        select(Message.id.label("message_id"), Message.sender_entity_id.label("entity_id")).where(
            Message.sender_entity_id.in_(ids)
        ),
        select(Message.id.label("message_id"), Message.recipient_entity_id.label("entity_id")).where(
            Message.recipient_entity_id.in_(ids)
        ),
    ).subquery()
    rows = db.execute(
        select(participation.c.entity_id, func.count(participation.c.message_id)).group_by(
            participation.c.entity_id
        )
    ).all()
    return {int(entity_id): int(count or 0) for entity_id, count in rows}


def get_identifiers(db: Session, entity_ids: Collection[int]) -> dict[int, list[EntityIdentifierRead]]:
    """Load identifiers for many entities in one query."""

    if not entity_ids:
        return {}
    rows = db.scalars(
        select(EntityIdentifier)
        .where(EntityIdentifier.entity_id.in_(list(entity_ids)))
        .order_by(EntityIdentifier.entity_id.asc(), EntityIdentifier.id.asc())
    ).all()
    grouped: dict[int, list[EntityIdentifierRead]] = defaultdict(list)
    for identifier in rows:
        grouped[identifier.entity_id].append(EntityIdentifierRead.model_validate(identifier))
    return dict(grouped)


def get_relation_count(db: Session, entity_id: int) -> int:
    """Count distinct relations the entity currently participates in."""

    count = db.scalar(
        select(func.count(func.distinct(EntityRelationMember.relation_id))).where(
            EntityRelationMember.entity_id == entity_id,
            EntityRelationMember.valid_until.is_(None),
        )
    )
    return int(count or 0)
