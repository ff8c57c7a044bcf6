"""Payment database model."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
import uuid

from sqlalchemy import String, Numeric, ForeignKey, TIMESTAMP, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskmarket.database import Base


class PaymentStatus(str, Enum):
    """Payment status enum. Only pending -> confirmed is driven by the workflow."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DISPUTED = "disputed"
    REFUNDED = "refunded"


class EscrowStatus(str, Enum):
    """Reserved for held-funds tracking; not driven by any transition."""
    NONE = "none"
    HELD = "held"
    RELEASED = "released"
    REFUNDED = "refunded"


class Payment(Base):
    """Manually confirmed payment record for an accepted submission."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )

    # References (kept when the task is deleted)
    task_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    submission_id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False
    )  # one payment per accepted submission
    worker_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Amounts
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    platform_commission: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0")
    )  # percentage 0-100
    platform_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0")
    )  # derived
    worker_payout: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0")
    )  # derived

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
        index=True
    )  # pending|confirmed|disputed|refunded
    proof: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    transaction_id: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False, default="manual")
    escrow_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EscrowStatus.NONE.value
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        default=datetime.utcnow,
        index=True
    )
    confirmed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP, nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_payments_amount"),
        CheckConstraint(
            "platform_commission >= 0 AND platform_commission <= 100",
            name="ck_payments_platform_commission"
        ),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, amount={self.amount}, status={self.status})>"
