"""Duplicate-entity detection strategies.

Each strategy contributes (candidate, primary) pairs as one SQL selectable so
the suggestion service can page over the union of primaries and fetch rows for
a page with one query per strategy.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, and_, exists, func, select
from sqlalchemy.orm import Session, aliased

from graphmerge.config import get_settings
from graphmerge.models.entity import Entity
from graphmerge.models.entity_identifier import EntityIdentifier
from graphmerge.services.merge_dismissals import dismissal_exists

ORPHANED_IDENTIFIER_REASON = "orphaned_telegram_id"
SHARED_IDENTIFIER_REASON = "shared_identifier"


@dataclass(slots=True)
class CandidateRow:
    """One probable duplicate of a primary entity found by a strategy."""

    candidate_id: int
    candidate_name: str
    candidate_created_at: datetime
    matched_value: str
    primary_id: int
    reason: str


@dataclass(slots=True)
class StrategyPage:
    """Rows for one page of a single strategy's primaries."""

    rows: list[CandidateRow]
    total: int


class DetectionStrategy(ABC):
    """Abstract duplicate detection heuristic."""

    reason: str

    @abstractmethod
    def candidate_pairs(self) -> Select:
        """Select ``candidate_id, candidate_name, candidate_created_at, matched_value, primary_id``.

        Dismissed pairs and soft-deleted entities must already be excluded.
        """

    def primary_ids(self) -> Select:
        pairs = self.candidate_pairs().subquery()
        return select(pairs.c.primary_id).distinct()

    def rows_for_primaries(self, db: Session, primary_ids: Sequence[int]) -> list[CandidateRow]:
        """Load every candidate row whose primary is in ``primary_ids``."""

        if not primary_ids:
            return []
        pairs = self.candidate_pairs().subquery()
        stmt = (
            select(pairs)
            .where(pairs.c.primary_id.in_(list(primary_ids)))
            .order_by(
                pairs.c.primary_id.asc(),
                pairs.c.candidate_created_at.desc(),
                pairs.c.candidate_id.asc(),
            )
        )
        return [
            CandidateRow(
                candidate_id=int(row.candidate_id),
                candidate_name=row.candidate_name,
                candidate_created_at=row.candidate_created_at,
                matched_value=str(row.matched_value),
                primary_id=int(row.primary_id),
                reason=self.reason,
            )
            for row in db.execute(stmt)
        ]

    def run(self, db: Session, *, limit: int, offset: int) -> StrategyPage:
        """Page over this strategy's distinct primary entities on its own."""

        primaries = self.primary_ids().subquery()
        total = int(db.scalar(select(func.count()).select_from(primaries)) or 0)
        page_ids = list(
            db.scalars(
                select(primaries.c.primary_id)
                .order_by(primaries.c.primary_id.asc())
                .limit(limit)
                .offset(offset)
            ).all()
        )
        return StrategyPage(rows=self.rows_for_primaries(db, page_ids), total=total)


class OrphanedIdentifierStrategy(DetectionStrategy):
    """Entities named ``"<prefix><digits>"`` whose digits are another entity's identifier value.

    The orphan itself must not carry an identifier of that type; it was created
    from a raw handle before the real contact was resolved.
    """

    reason = ORPHANED_IDENTIFIER_REASON

    def __init__(self, *, name_prefix: str, identifier_type: str) -> None:
        self.name_prefix = name_prefix
        self.identifier_type = identifier_type

    def candidate_pairs(self) -> Select:
        candidate = aliased(Entity, name="candidate")
        primary = aliased(Entity, name="primary_entity")
        primary_identifier = aliased(EntityIdentifier, name="primary_identifier")
        own_identifier = aliased(EntityIdentifier, name="own_identifier")
        name_suffix = func.substr(candidate.name, len(self.name_prefix) + 1)

        return (
            select(
                candidate.id.label("candidate_id"),
                candidate.name.label("candidate_name"),
                candidate.created_at.label("candidate_created_at"),
                primary_identifier.identifier_value.label("matched_value"),
                primary_identifier.entity_id.label("primary_id"),
            )
            .select_from(candidate)
            .join(
                primary_identifier,
                and_(
                    primary_identifier.identifier_type == self.identifier_type,
                    primary_identifier.identifier_value == name_suffix,
                ),
            )
            .join(primary, primary.id == primary_identifier.entity_id)
            .where(
                candidate.name.regexp_match(f"^{re.escape(self.name_prefix)}[0-9]+$"),
                candidate.deleted_at.is_(None),
                primary.deleted_at.is_(None),
                primary.id != candidate.id,
                ~exists().where(
                    own_identifier.entity_id == candidate.id,
                    own_identifier.identifier_type == self.identifier_type,
                ),
                ~dismissal_exists(primary_identifier.entity_id, candidate.id),
            )
        )


class SharedIdentifierStrategy(DetectionStrategy):
    """Entities whose display name equals a username identifier owned by another entity.

    The name is normalised by removing every ``@`` and trimming surrounding
    whitespace; other punctuation is kept, so ``"@john.doe"`` matches the
    username ``john.doe`` but not ``johndoe``. The comparison is
    case-insensitive and only applies to handles of at least ``min_length``
    characters.
    """

    reason = SHARED_IDENTIFIER_REASON

    def __init__(self, *, identifier_type: str, min_length: int) -> None:
        self.identifier_type = identifier_type
        self.min_length = min_length

    def candidate_pairs(self) -> Select:
        candidate = aliased(Entity, name="candidate")
        primary = aliased(Entity, name="primary_entity")
        primary_identifier = aliased(EntityIdentifier, name="primary_identifier")
        handle = func.trim(func.replace(candidate.name, "@", ""))

        return (
            select(
                candidate.id.label("candidate_id"),
                candidate.name.label("candidate_name"),
                candidate.created_at.label("candidate_created_at"),
                primary_identifier.identifier_value.label("matched_value"),
                primary_identifier.entity_id.label("primary_id"),
            )
            .select_from(candidate)
            .join(
                primary_identifier,
                and_(
                    primary_identifier.identifier_type == self.identifier_type,
                    func.lower(primary_identifier.identifier_value) == func.lower(handle),
                    primary_identifier.entity_id != candidate.id,
                ),
            )
            .join(primary, primary.id == primary_identifier.entity_id)
            .where(
                candidate.deleted_at.is_(None),
                primary.deleted_at.is_(None),
                func.length(handle) >= self.min_length,
                ~dismissal_exists(primary_identifier.entity_id, candidate.id),
            )
        )


def default_strategies() -> tuple[DetectionStrategy, ...]:
    """Strategies in priority order; earlier reasons win when groups overlap."""

    settings = get_settings()
    return (
        OrphanedIdentifierStrategy(
            name_prefix=settings.orphan_name_prefix,
            identifier_type=settings.orphan_identifier_type,
        ),
        SharedIdentifierStrategy(
            identifier_type=settings.shared_identifier_type,
            min_length=settings.shared_identifier_min_length,
        ),
    )
