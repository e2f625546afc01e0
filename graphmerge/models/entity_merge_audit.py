"""Entity merge audit log model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from graphmerge.models.base import Base, IdMixin


class EntityMergeAudit(Base, IdMixin):
    """Immutable record of one executed merge and the policy it was run with."""

    __tablename__ = "entity_merge_audits"

    source_entity_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    target_entity_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    identifiers_moved: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    facts_moved: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    resolutions_json: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list, nullable=False)
    details_json: Mapped[dict[str, object]] = mapped_column(JSON, default=dict, nullable=False)
    merged_by: Mapped[str] = mapped_column(String(100), default="user", nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
