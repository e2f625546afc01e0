"""Interaction participant ORM model."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin


class InteractionParticipant(Base, IdMixin):
    """Entity taking part in one interaction (chat session, call, meeting)."""

    __tablename__ = "interaction_participants"

    interaction_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
    role: Mapped[str] = mapped_column(String(50), default="participant", nullable=False)
    identifier_type: Mapped[str] = mapped_column(String(50), nullable=False)
    identifier_value: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
