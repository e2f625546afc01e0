"""Commitment ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class Commitment(Base, IdMixin, TimestampMixin):
    """Promise or request made by one entity to another."""

    __tablename__ = "commitments"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    from_entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    to_entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
