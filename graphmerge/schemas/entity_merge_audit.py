"""Entity merge audit response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class EntityMergeAuditRead(BaseModel):
    """Serialized entity merge audit record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    source_entity_id: int
    target_entity_id: int
    identifiers_moved: int
    facts_moved: int
    resolutions_json: list[dict[str, str]]
    details_json: dict[str, object]
    merged_by: str
    timestamp: datetime
