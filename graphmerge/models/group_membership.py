"""Group membership ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class GroupMembership(Base, IdMixin, TimestampMixin):
    """Membership of an entity in a group chat."""

    __tablename__ = "group_memberships"
    __table_args__ = (UniqueConstraint("chat_id", "entity_id", name="uq_group_memberships_chat_entity"),)

    chat_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    left_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
