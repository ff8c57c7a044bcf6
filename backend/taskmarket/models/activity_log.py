"""Activity log database model."""

from datetime import datetime

from sqlalchemy import String, Integer, TIMESTAMP, Index
from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class ActivityLog(Base):
    """Audit trail: one row per successful workflow transition."""

    __tablename__ = "activity_log"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    event_type: Mapped[str] = mapped_column(String(50), nullable=False)

    # Plain references so the trail survives task deletion
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    task_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    data: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    __table_args__ = (
        Index('idx_activity_created', 'created_at'),
        Index('idx_activity_type', 'event_type'),
    )

    def __repr__(self) -> str:
        return f"<ActivityLog(id={self.id}, type={self.event_type}, task_id={self.task_id})>"
