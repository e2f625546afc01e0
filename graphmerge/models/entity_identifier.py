"""Entity identifier ORM model."""

from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, CreatedAtMixin, IdMixin


class EntityIdentifier(Base, IdMixin, CreatedAtMixin):
    """Typed external handle (messaging user id, username, phone, ...) bound to one entity."""

    __tablename__ = "entity_identifiers"
    __table_args__ = (
        UniqueConstraint("identifier_type", "identifier_value", name="uq_entity_identifiers_type_value"),
        UniqueConstraint("entity_id", "identifier_type", name="uq_entity_identifiers_entity_type"),
        Index("ix_entity_identifiers_type_value", "identifier_type", "identifier_value"),
    )

    entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    identifier_type: Mapped[str] = mapped_column(String(50), nullable=False)
    identifier_value: Mapped[str] = mapped_column(String(255), nullable=False)
    metadata_json: Mapped[dict[str, object] | None] = mapped_column(JSON, nullable=True)
