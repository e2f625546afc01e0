"""Entity fact ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class EntityFact(Base, IdMixin, TimestampMixin):
    """Time-versioned attribute of an entity; current while ``valid_until`` is null."""

    __tablename__ = "entity_facts"
    __table_args__ = (Index("ix_entity_facts_entity_type", "entity_id", "fact_type"),)

    entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    fact_type: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    value: Mapped[str | None] = mapped_column(String(500), nullable=True)
    source: Mapped[str] = mapped_column(String(20), default="manual", nullable=False)
    rank: Mapped[str] = mapped_column(String(20), default="normal", nullable=False)
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
