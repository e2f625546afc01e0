"""Entity, identifier and fact response schemas."""

from pydantic import BaseModel, ConfigDict


class EntityIdentifierRead(BaseModel):
    """Serialized entity identifier."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    identifier_type: str
    identifier_value: str


class EntityFactRead(BaseModel):
    """Serialized current entity fact."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    fact_type: str
    value: str | None
    rank: str
