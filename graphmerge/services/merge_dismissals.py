"""Ledger of dismissed merge suggestions."""

from __future__ import annotations

import logging

from sqlalchemy import ColumnElement, delete, exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from graphmerge.models.dismissed_merge_suggestion import DismissedMergeSuggestion
from graphmerge.services.entity_stats import get_live_entity
from graphmerge.services.errors import EntityNotFoundError

logger = logging.getLogger(__name__)


def dismiss_merge_suggestion(
    db: Session,
    primary_id: int,
    candidate_id: int,
    dismissed_by: str = "user",
) -> bool:
    """Record that ``candidate_id`` must never again be suggested for ``primary_id``.

    Returns ``True`` when a ledger row was written and ``False`` when the pair
    was already dismissed. Raises ``EntityNotFoundError`` for unknown ids.
    """

    if get_live_entity(db, primary_id) is None:
        raise EntityNotFoundError(primary_id, role="Primary")
    if get_live_entity(db, candidate_id) is None:
        raise EntityNotFoundError(candidate_id, role="Candidate")

    if is_dismissed(db, primary_id, candidate_id):
        logger.debug(
            "merge_suggestion.already_dismissed primary_id=%s candidate_id=%s",
            primary_id,
            candidate_id,
        )
        return False

    db.add(
        DismissedMergeSuggestion(
            primary_entity_id=primary_id,
            dismissed_entity_id=candidate_id,
            dismissed_by=dismissed_by,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # A concurrent dismiss won the insert; the unique pair constraint is the idempotence signal.
        db.rollback()
        logger.debug(
            "merge_suggestion.dismiss_race primary_id=%s candidate_id=%s",
            primary_id,
            candidate_id,
        )
        return False

    logger.info(
        "merge_suggestion.dismissed primary_id=%s candidate_id=%s dismissed_by=%s",
        primary_id,
        candidate_id,
        dismissed_by,
    )
    return True


def is_dismissed(db: Session, primary_id: int, candidate_id: int) -> bool:
    """Return whether the (primary, candidate) pair is in the ledger."""

    row_id = db.scalar(
        select(DismissedMergeSuggestion.id)
        .where(
            DismissedMergeSuggestion.primary_entity_id == primary_id,
            DismissedMergeSuggestion.dismissed_entity_id == candidate_id,
        )
        .limit(1)
    )
    return row_id is not None


def dismissal_exists(
    primary_column: ColumnElement[int],
    candidate_column: ColumnElement[int],
) -> ColumnElement[bool]:
    """Correlated EXISTS clause matching ledger rows for the given pair columns."""

    return exists().where(
        DismissedMergeSuggestion.primary_entity_id == primary_column,
        DismissedMergeSuggestion.dismissed_entity_id == candidate_column,
    )


def delete_dismissals_for_entity(db: Session, entity_id: int) -> int:
    """Drop every ledger row naming the entity on either side. Does not commit."""

    result = db.execute(
        delete(DismissedMergeSuggestion)
        .where(
            or_(
                DismissedMergeSuggestion.primary_entity_id == entity_id,
                DismissedMergeSuggestion.dismissed_entity_id == entity_id,
            )
        )
        .execution_options(synchronize_session=False)
    )
    return int(result.rowcount or 0)
