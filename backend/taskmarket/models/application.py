"""Application database model."""

from datetime import datetime
from enum import Enum
import uuid

from sqlalchemy import String, Text, ForeignKey, TIMESTAMP, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class ApplicationStatus(str, Enum):
    """Application statuses."""
    APPLIED = "applied"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Application(Base):
    """A worker's bid to perform a task."""

    __tablename__ = "applications"

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

    proposal: Mapped[str] = mapped_column(Text, nullable=False)
    expected_delivery_time: Mapped[str] = mapped_column(String(100), nullable=False)
    attachment: Mapped[str] = mapped_column(String(500), nullable=False, default="")  # stored file path

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.APPLIED.value,
        index=True
    )  # applied|accepted|rejected

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    # One application per worker per task
    __table_args__ = (
        UniqueConstraint("task_id", "worker_id", name="uq_applications_task_worker"),
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, task_id={self.task_id}, status={self.status})>"
