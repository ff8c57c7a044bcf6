"""User database model."""

from datetime import datetime
from enum import Enum
import uuid

from sqlalchemy import String, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class UserRole(str, Enum):
    """Platform roles."""
    ADMIN = "admin"
    COMPANY = "company"
    WORKER = "worker"


class UserStatus(str, Enum):
    """Account status; blocked users cannot authenticate."""
    ACTIVE = "active"
    BLOCKED = "blocked"


class User(Base):
    """User model: the identity every workflow operation is performed as."""

    __tablename__ = "users"

    # Primary Key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )

    # Basic Info
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False, index=True)
    api_key_hash: Mapped[str] = mapped_column(String(256), nullable=False, index=True)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True
    )  # admin|company|worker
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserStatus.ACTIVE.value,
        index=True
    )  # active|blocked

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )
    last_seen_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
