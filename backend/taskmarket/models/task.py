"""Task database model."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List
import uuid

from sqlalchemy import String, Text, Integer, Numeric, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class TaskStatus(str, Enum):
    """Task lifecycle statuses."""
    DRAFT = "draft"
    PENDING_APPROVAL = "pendingApproval"
    OPEN = "open"
    ASSIGNED = "assigned"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    REJECTED = "rejected"


# Statuses in which the owning company may still edit the task
EDITABLE_STATUSES = (TaskStatus.DRAFT, TaskStatus.PENDING_APPROVAL, TaskStatus.REJECTED)


class Task(Base):
    """Task model representing a unit of short-term paid work posted by a company."""

    __tablename__ = "tasks"

    # Primary Key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )

    # Owner (immutable)
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Task Details
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    required_skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General", index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=1)  # days, 1-3

    # Pricing
    payment_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    deadline: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False)

    # Staffing
    number_of_workers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    assigned_workers: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )  # user ids in acceptance order

    # Status & State
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TaskStatus.DRAFT.value,
        index=True
    )  # draft|pendingApproval|open|assigned|submitted|completed|rejected
    rejection_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow,
        index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint("duration BETWEEN 1 AND 3", name="ck_tasks_duration"),
        CheckConstraint("payment_amount >= 0", name="ck_tasks_payment_amount"),
        CheckConstraint("number_of_workers >= 1", name="ck_tasks_number_of_workers"),
    )

    def touch(self) -> None:
        """Bump updated_at; called by the services right before persisting."""
        self.updated_at = datetime.utcnow()

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title}, status={self.status})>"
