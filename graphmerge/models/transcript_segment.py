"""Transcript segment ORM model."""

from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, CreatedAtMixin, IdMixin


class TranscriptSegment(Base, IdMixin, CreatedAtMixin):
    """Speaker-attributed slice of a call or meeting transcript."""

    __tablename__ = "transcript_segments"

    interaction_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    speaker_label: Mapped[str] = mapped_column(String(50), nullable=False)
    speaker_entity_id: Mapped[int | None] = mapped_column(ForeignKey("entities.id"), index=True, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    end_time: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
