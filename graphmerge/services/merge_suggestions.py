"""Merge suggestion listing across all detection strategies."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select, union
from sqlalchemy.orm import Session

from graphmerge.entity_resolution.strategies import CandidateRow, DetectionStrategy, default_strategies
from graphmerge.models.entity import Entity
from graphmerge.schemas.merge_suggestion import (
    MergeSuggestionCandidate,
    MergeSuggestionGroup,
    MergeSuggestionPrimary,
    MergeSuggestionsResponse,
)
from graphmerge.services.entity_stats import get_identifiers, get_message_counts


def list_merge_suggestions(
    db: Session,
    *,
    limit: int,
    offset: int,
    strategies: Sequence[DetectionStrategy] | None = None,
) -> MergeSuggestionsResponse:
    """Return suggestion groups paginated over distinct primary entities."""

    active = tuple(strategies) if strategies is not None else default_strategies()
    if not active:
        return MergeSuggestionsResponse(groups=[], total=0, limit=limit, offset=offset)

    primary_selects = [strategy.primary_ids() for strategy in active]
    primaries = (primary_selects[0] if len(primary_selects) == 1 else union(*primary_selects)).subquery()
    total = int(db.scalar(select(func.count()).select_from(primaries)) or 0)
    page_ids = [
        int(primary_id)
        for primary_id in db.scalars(
            select(primaries.c.primary_id)
            .order_by(primaries.c.primary_id.asc())
            .limit(limit)
            .offset(offset)
        ).all()
    ]
    if not page_ids:
        return MergeSuggestionsResponse(groups=[], total=total, limit=limit, offset=offset)

    rows: list[CandidateRow] = []
    for strategy in active:
        rows.extend(strategy.rows_for_primaries(db, page_ids))

    primary_entities = {
        entity.id: entity for entity in db.scalars(select(Entity).where(Entity.id.in_(page_ids))).all()
    }
    message_counts = get_message_counts(db, {row.candidate_id for row in rows})
    primary_identifiers = get_identifiers(db, page_ids)

    grouped = group_candidate_rows(rows, [strategy.reason for strategy in active])
    groups: list[MergeSuggestionGroup] = []
    for primary_id in page_ids:
        entry = grouped.get(primary_id)
        primary = primary_entities.get(primary_id)
        if entry is None or primary is None:
            continue
        reason, candidate_rows = entry
        groups.append(
            MergeSuggestionGroup(
                primary_entity=MergeSuggestionPrimary(
                    id=primary.id,
                    name=primary.name,
                    type=primary.type,
                    profile_photo=primary.profile_photo,
                    identifiers=primary_identifiers.get(primary_id, []),
                ),
                candidates=[
                    MergeSuggestionCandidate(
                        id=row.candidate_id,
                        name=row.candidate_name,
                        matched_value=row.matched_value,
                        created_at=row.candidate_created_at,
                        message_count=message_counts.get(row.candidate_id, 0),
                        reason=row.reason,
                    )
                    for row in candidate_rows
                ],
                reason=reason,
            )
        )
    return MergeSuggestionsResponse(groups=groups, total=total, limit=limit, offset=offset)


def group_candidate_rows(
    rows: Iterable[CandidateRow],
    reason_priority: Sequence[str],
) -> dict[int, tuple[str, list[CandidateRow]]]:
    """Group rows by primary id, keeping one row per candidate.

    The output does not depend on the order of ``rows``: when a candidate is
    found by several strategies the row from the highest-priority reason wins,
    and a group's reason is the highest-priority reason among its rows.
    """

    rank = {reason: index for index, reason in enumerate(reason_priority)}
    by_primary: dict[int, list[CandidateRow]] = defaultdict(list)
    for row in rows:
        by_primary[row.primary_id].append(row)

    grouped: dict[int, tuple[str, list[CandidateRow]]] = {}
    for primary_id, primary_rows in by_primary.items():
        primary_rows.sort(key=lambda row: (rank.get(row.reason, len(rank)), row.reason, row.candidate_id))
        kept: dict[int, CandidateRow] = {}
        for row in primary_rows:
            kept.setdefault(row.candidate_id, row)
        candidates = sorted(
            kept.values(),
            key=lambda row: (-row.candidate_created_at.timestamp(), row.candidate_id),
        )
        grouped[primary_id] = (primary_rows[0].reason, candidates)
    return grouped
