"""Side-by-side merge previews with field-level conflicts."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from graphmerge.models.entity_fact import EntityFact
from graphmerge.models.entity_identifier import EntityIdentifier
from graphmerge.schemas.entity import EntityFactRead, EntityIdentifierRead
from graphmerge.schemas.merge import EntityMergeData, MergeConflict, MergePreview
from graphmerge.services.entity_stats import get_live_entity, get_message_counts, get_relation_count
from graphmerge.services.errors import EntityNotFoundError


def get_merge_preview(db: Session, source_id: int, target_id: int) -> MergePreview:
    """Load both entities and list the conflicts a human has to resolve."""

    source = get_entity_merge_data(db, source_id)
    target = get_entity_merge_data(db, target_id)
    return MergePreview(source=source, target=target, conflicts=detect_conflicts(source, target))


def get_entity_merge_data(db: Session, entity_id: int) -> EntityMergeData:
    """Collect identifiers, current facts and activity counters for one entity."""

    entity = get_live_entity(db, entity_id)
    if entity is None:
        raise EntityNotFoundError(entity_id)

    identifiers = db.scalars(
        select(EntityIdentifier)
        .where(EntityIdentifier.entity_id == entity_id)
        .order_by(EntityIdentifier.id.asc())
    ).all()
    current_facts = db.scalars(
        select(EntityFact)
        .where(EntityFact.entity_id == entity_id, EntityFact.valid_until.is_(None))
        .order_by(EntityFact.id.asc())
    ).all()

    return EntityMergeData(
        id=entity.id,
        name=entity.name,
        type=entity.type,
        identifiers=[EntityIdentifierRead.model_validate(row) for row in identifiers],
        current_facts=[EntityFactRead.model_validate(row) for row in current_facts],
        message_count=get_message_counts(db, [entity_id]).get(entity_id, 0),
        relation_count=get_relation_count(db, entity_id),
    )


def detect_conflicts(source: EntityMergeData, target: EntityMergeData) -> list[MergeConflict]:
    """Return one conflict per (field, type) where both sides hold different current values."""

    conflicts: list[MergeConflict] = []

    target_identifiers = _first_by_type((row.identifier_type, row.identifier_value) for row in target.identifiers)
    seen_identifier_types: set[str] = set()
    for identifier in source.identifiers:
        if identifier.identifier_type in seen_identifier_types:
            continue
        seen_identifier_types.add(identifier.identifier_type)
        if identifier.identifier_type not in target_identifiers:
            continue
        target_value = target_identifiers[identifier.identifier_type]
        if target_value != identifier.identifier_value:
            conflicts.append(
                MergeConflict(
                    field="identifier",
                    type=identifier.identifier_type,
                    source_value=identifier.identifier_value,
                    target_value=target_value,
                )
            )

    target_facts = _first_by_type((row.fact_type, row.value) for row in target.current_facts)
    seen_fact_types: set[str] = set()
    for fact in source.current_facts:
        if fact.fact_type in seen_fact_types:
            continue
        seen_fact_types.add(fact.fact_type)
        if fact.fact_type not in target_facts:
            continue
        target_value = target_facts[fact.fact_type]
        if target_value != fact.value:
            conflicts.append(
                MergeConflict(
                    field="fact",
                    type=fact.fact_type,
                    source_value=fact.value,
                    target_value=target_value,
                )
            )

    return conflicts


def _first_by_type(pairs) -> dict[str, str | None]:
    first: dict[str, str | None] = {}
    for type_, value in pairs:
        first.setdefault(type_, value)
    return first
