"""Worker and company profile database models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List
import uuid

from sqlalchemy import String, Text, Integer, Numeric, ForeignKey, TIMESTAMP
from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WorkerProfile(Base):
    """Worker profile holding skills and the counters bumped by the workflow."""

    __tablename__ = "worker_profiles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )

    skills: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    availability_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AvailabilityStatus.AVAILABLE.value
    )

    # Workflow counters
    completed_tasks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_earnings: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0")
    )

    # Reputation
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False, default=Decimal("0"))
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<WorkerProfile(user_id={self.user_id}, completed={self.completed_tasks})>"


class CompanyProfile(Base):
    """Company profile."""

    __tablename__ = "company_profiles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )

    company_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    domain: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    logo: Mapped[str] = mapped_column(String(500), nullable=False, default="")  # stored file path
    verification_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VerificationStatus.PENDING.value
    )

    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False, default=Decimal("0"))
    total_ratings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<CompanyProfile(user_id={self.user_id}, company_name={self.company_name})>"
