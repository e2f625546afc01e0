"""Message ORM model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin


class Message(Base, IdMixin):
    """Stored chat message with resolved sender/recipient entities."""

    __tablename__ = "messages"

    chat_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    sender_entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
    recipient_entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
