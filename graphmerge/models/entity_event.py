"""Entity event ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class EntityEvent(Base, IdMixin, TimestampMixin):
    """Meeting, deadline or follow-up about a subject entity."""

    __tablename__ = "entity_events"

    entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    related_entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
