"""Dismissed merge suggestion ledger model."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, CreatedAtMixin, IdMixin


class DismissedMergeSuggestion(Base, IdMixin, CreatedAtMixin):
    """Permanent instruction to stop suggesting ``dismissed`` as a duplicate of ``primary``."""

    __tablename__ = "dismissed_merge_suggestions"
    __table_args__ = (
        UniqueConstraint(
            "primary_entity_id",
            "dismissed_entity_id",
            name="uq_dismissed_merge_suggestions_pair",
        ),
    )

    primary_entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    dismissed_entity_id: Mapped[int] = mapped_column(ForeignKey("entities.id"), index=True, nullable=False)
    dismissed_by: Mapped[str] = mapped_column(String(100), default="user", nullable=False)
