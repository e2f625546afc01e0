"""Entity relation and relation member ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class EntityRelation(Base, IdMixin, TimestampMixin):
    """Named relation (employment, marriage, team, ...) whose participants play roles."""

    __tablename__ = "entity_relations"

    relation_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source: Mapped[str] = mapped_column(String(20), default="extracted", nullable=False)
    metadata_json: Mapped[dict[str, object] | None] = mapped_column(JSON, nullable=True)


class EntityRelationMember(Base):
    """Participation of one entity in a relation with a role; unique per (relation, entity, role)."""

    __tablename__ = "entity_relation_members"
    __table_args__ = (Index("ix_entity_relation_members_entity", "entity_id"),)

    relation_id: Mapped[int] = mapped_column(
        ForeignKey("entity_relations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), primary_key=True)
    role: Mapped[str] = mapped_column(String(50), primary_key=True)
    label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
