"""Merge suggestion, preview and merge execution routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from graphmerge.config import get_settings
from graphmerge.db.dependencies import get_db
from graphmerge.schemas.common import ApiResponse
from graphmerge.schemas.entity_merge_audit import EntityMergeAuditRead
from graphmerge.schemas.merge import MergePreview, MergeRequest, MergeResult
from graphmerge.schemas.merge_suggestion import DismissResult, MergeSuggestionsResponse
from graphmerge.services.entity_merge import list_entity_merge_audits, merge_entities
from graphmerge.services.errors import EntityNotFoundError, MergeConflictError
from graphmerge.services.merge_dismissals import dismiss_merge_suggestion
from graphmerge.services.merge_preview import get_merge_preview
from graphmerge.services.merge_suggestions import list_merge_suggestions

router = APIRouter()

_settings = get_settings()


@router.get("/entities/merge-suggestions", response_model=ApiResponse[MergeSuggestionsResponse])
def get_merge_suggestions(
    limit: int = Query(_settings.suggestion_default_limit, ge=1, le=_settings.suggestion_max_limit),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> ApiResponse[MergeSuggestionsResponse]:
    """Return groups of probable duplicates, paginated over primary entities."""

    return ApiResponse(data=list_merge_suggestions(db, limit=limit, offset=offset))


@router.post(
    "/entities/merge-suggestions/{primary_id}/dismiss/{candidate_id}",
    response_model=ApiResponse[DismissResult],
)
def dismiss_suggestion(
    primary_id: int = Path(..., ge=1),
    candidate_id: int = Path(..., ge=1),
    dismissed_by: str = Query("user", min_length=1, max_length=100),
    db: Session = Depends(get_db),
) -> ApiResponse[DismissResult]:
    """Never suggest ``candidate_id`` for ``primary_id`` again."""

    try:
        created = dismiss_merge_suggestion(db, primary_id, candidate_id, dismissed_by=dismissed_by)
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(
        data=DismissResult(
            primary_entity_id=primary_id,
            dismissed_entity_id=candidate_id,
            created=created,
        )
    )


@router.get(
    "/entities/merge-suggestions/preview/{source_id}/{target_id}",
    response_model=ApiResponse[MergePreview],
)
def preview_merge(
    source_id: int = Path(..., ge=1),
    target_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[MergePreview]:
    """Compare two entities and list their conflicting fields."""

    try:
        preview = get_merge_preview(db, source_id, target_id)
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=preview)


@router.post("/entities/merge-suggestions/merge", response_model=ApiResponse[MergeResult])
def execute_merge(
    payload: MergeRequest,
    db: Session = Depends(get_db),
) -> ApiResponse[MergeResult]:
    """Merge the source entity into the target entity."""

    try:
        result = merge_entities(db, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except MergeConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(data=result)


@router.get("/entities/{entity_id}/merge-audits", response_model=ApiResponse[list[EntityMergeAuditRead]])
def get_entity_merge_audits(
    entity_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[EntityMergeAuditRead]]:
    """List merges the entity took part in."""

    audits = list_entity_merge_audits(db, entity_id)
    return ApiResponse(data=[EntityMergeAuditRead.model_validate(row) for row in audits])
