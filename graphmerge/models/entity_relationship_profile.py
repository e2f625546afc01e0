"""Cached relationship profile ORM model."""

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class EntityRelationshipProfile(Base, IdMixin, TimestampMixin):
    """Derived per-entity relationship summary, recomputed lazily when missing."""

    __tablename__ = "entity_relationship_profiles"

    entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), unique=True, index=True, nullable=False)
    relationship_type: Mapped[str] = mapped_column(String(30), nullable=False)
    relationship_summary: Mapped[str] = mapped_column(Text, default="", nullable=False)
    total_messages: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    top_topics_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
