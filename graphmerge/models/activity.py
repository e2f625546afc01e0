"""Activity ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin, TimestampMixin


class Activity(Base, IdMixin, TimestampMixin):
    """Project, task or area of work owned by one entity, optionally for a client entity."""

    __tablename__ = "activities"

    name: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)
    owner_entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    client_entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
