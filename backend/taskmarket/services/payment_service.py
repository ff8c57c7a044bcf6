"""Payment service: manual payment records created on accepted work."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.config import settings
from taskmarket.models.payment import Payment, PaymentStatus
from taskmarket.models.submission import Submission
from taskmarket.models.task import Task
from taskmarket.models.user import UserRole
from taskmarket.schemas.payment import PaymentAdjust, PaymentConfirm
from taskmarket.services import repository
from taskmarket.services.access_policy import Actor, require_ownership, require_role, require_status
from taskmarket.services.activity_service import record_transition
from taskmarket.services.commission import apply_commission

logger = logging.getLogger(__name__)


async def create_payment(db: AsyncSession, task: Task, submission: Submission) -> Payment:
    """
    Create the pending payment owed for an accepted submission.

    The commission percentage is read from settings at call time; fee and
    payout are derived right before the row is persisted.
    """
    payment = Payment(
        task_id=task.id,
        submission_id=submission.id,
        worker_id=submission.worker_id,
        company_id=task.company_id,
        amount=task.payment_amount,
        platform_commission=settings.PLATFORM_COMMISSION_PERCENT,
        status=PaymentStatus.PENDING.value,
    )
    apply_commission(payment)

    db.add(payment)
    await db.commit()
    await db.refresh(payment)

    await record_transition(db, "payment_created", task.company_id, task.id, {
        "payment_id": payment.id,
        "worker_id": payment.worker_id,
        "amount": str(payment.amount),
        "platform_fee": str(payment.platform_fee),
        "worker_payout": str(payment.worker_payout),
    })

    return payment


async def confirm_payment(
    db: AsyncSession,
    payment_id: str,
    actor: Actor,
    confirm_data: Optional[PaymentConfirm] = None
) -> Payment:
    """
    Record that the company has paid the worker.

    Args:
        db: Database session
        payment_id: Payment UUID
        actor: Paying company
        confirm_data: Optional proof file path and transaction id

    Returns:
        Confirmed payment

    Raises:
        NotFound: If the payment does not exist
        Forbidden: If the actor is not the paying company
        InvalidTransition: If the payment is not pending
    """
    require_role(actor, UserRole.COMPANY)
    payment = await repository.require_payment(db, payment_id)
    require_ownership(actor, payment.company_id, "payment")
    require_status(payment.status, [PaymentStatus.PENDING], "payment")

    confirm_data = confirm_data or PaymentConfirm()

    payment.status = PaymentStatus.CONFIRMED.value
    payment.confirmed_at = datetime.utcnow()
    if confirm_data.proof:
        payment.proof = confirm_data.proof
    if confirm_data.transaction_id:
        payment.transaction_id = confirm_data.transaction_id

    profile = await repository.get_or_create_worker_profile(db, payment.worker_id)
    profile.total_earnings = (profile.total_earnings or Decimal("0")) + payment.worker_payout

    await db.commit()
    await db.refresh(payment)

    await record_transition(db, "payment_confirmed", actor.id, payment.task_id, {
        "payment_id": payment.id,
        "worker_id": payment.worker_id,
        "worker_payout": str(payment.worker_payout),
    })

    return payment


async def adjust_payment(
    db: AsyncSession,
    payment_id: str,
    actor: Actor,
    adjust_data: PaymentAdjust
) -> Payment:
    """Admin correction of a pending payment's amount or commission."""
    require_role(actor, UserRole.ADMIN)
    payment = await repository.require_payment(db, payment_id)
    require_status(payment.status, [PaymentStatus.PENDING], "payment")

    update_data = {
        field: value
        for field, value in adjust_data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    for field, value in update_data.items():
        setattr(payment, field, value)
    apply_commission(payment)

    await db.commit()
    await db.refresh(payment)

    await record_transition(db, "payment_adjusted", actor.id, payment.task_id, {
        "payment_id": payment.id,
        "amount": str(payment.amount),
        "platform_commission": str(payment.platform_commission),
        "platform_fee": str(payment.platform_fee),
        "worker_payout": str(payment.worker_payout),
    })

    return payment


async def list_company_payments(
    db: AsyncSession,
    actor: Actor,
    status: Optional[str] = None
) -> List[Payment]:
    require_role(actor, UserRole.COMPANY)
    query = select(Payment).where(Payment.company_id == actor.id)
    if status:
        query = query.where(Payment.status == status)
    result = await db.execute(query.order_by(Payment.created_at.desc()))
    return list(result.scalars().all())


async def list_all_payments(
    db: AsyncSession,
    actor: Actor,
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0
) -> List[Payment]:
    require_role(actor, UserRole.ADMIN)
    query = select(Payment)
    if status:
        query = query.where(Payment.status == status)
    result = await db.execute(
        query.order_by(Payment.created_at.desc()).offset(offset).limit(limit)
    )
    return list(result.scalars().all())


async def get_worker_earnings(db: AsyncSession, actor: Actor) -> Dict[str, Any]:
    """
    Summarize a worker's payments.

    Returns:
        Dict with total_earnings (profile running total), total_pending and
        total_earned (payout sums of pending and confirmed payments),
        completed_tasks and the payments themselves, newest first
    """
    require_role(actor, UserRole.WORKER)
    result = await db.execute(
        select(Payment)
        .where(Payment.worker_id == actor.id)
        .order_by(Payment.created_at.desc())
    )
    payments = list(result.scalars().all())

    total_pending = sum(
        (p.worker_payout for p in payments if p.status == PaymentStatus.PENDING.value),
        Decimal("0"),
    )
    total_earned = sum(
        (p.worker_payout for p in payments if p.status == PaymentStatus.CONFIRMED.value),
        Decimal("0"),
    )

    profile = await repository.get_worker_profile(db, actor.id)
    return {
        "total_earnings": profile.total_earnings if profile else Decimal("0"),
        "total_pending": total_pending,
        "total_earned": total_earned,
        "completed_tasks": profile.completed_tasks if profile else 0,
        "payments": payments,
    }
