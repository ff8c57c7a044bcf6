"""Submission database model."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List
import uuid

from sqlalchemy import String, Text, Integer, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class ReviewStatus(str, Enum):
    """Submission review statuses."""
    PENDING = "pending"
    REVISION_REQUESTED = "revisionRequested"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Values a company may set when reviewing
REVIEW_DECISIONS = (ReviewStatus.ACCEPTED, ReviewStatus.REJECTED, ReviewStatus.REVISION_REQUESTED)


class Submission(Base):
    """A worker's delivered work for an assigned task; resubmissions accumulate files."""

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )

    task_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    worker_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    files: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )  # [{"filename": ..., "path": ..., "uploaded_at": iso8601}]
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    submitted_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    # Review
    review_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReviewStatus.PENDING.value,
        index=True
    )  # pending|revisionRequested|accepted|rejected
    review_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    revision_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("task_id", "worker_id", name="uq_submissions_task_worker"),
    )

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, task_id={self.task_id}, review={self.review_status})>"
