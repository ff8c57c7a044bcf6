"""Task service: posting, moderation and deletion of tasks."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.config import settings
from taskmarket.core.errors import Forbidden, InvalidArgument
from taskmarket.models.task import Task, TaskStatus, EDITABLE_STATUSES
from taskmarket.models.user import UserRole
from taskmarket.schemas.task import TaskCreate, TaskUpdate
from taskmarket.services import repository
from taskmarket.services.access_policy import Actor, require_ownership, require_role, require_status
from taskmarket.services.activity_service import record_transition

logger = logging.getLogger(__name__)


def validate_task_fields(data: Dict[str, Any]) -> None:
    """
    Check task field ranges that must hold after any create or update.

    Raises:
        InvalidArgument: On the first offending field
    """
    for field in ("title", "description"):
        if field in data and not str(data[field] or "").strip():
            raise InvalidArgument(f"{field} is required", entity="task", field=field)

    if "payment_amount" in data and Decimal(data["payment_amount"]) < 0:
        raise InvalidArgument("payment_amount must be non-negative", entity="task", field="payment_amount")

    if "duration" in data and not 1 <= int(data["duration"]) <= 3:
        raise InvalidArgument("duration must be between 1 and 3 days", entity="task", field="duration")

    if "number_of_workers" in data and int(data["number_of_workers"]) < 1:
        raise InvalidArgument("number_of_workers must be at least 1", entity="task", field="number_of_workers")


async def create_task(db: AsyncSession, actor: Actor, task_data: TaskCreate) -> Task:
    """
    Post a new task. New tasks always wait for admin approval.

    Args:
        db: Database session
        actor: Posting company
        task_data: Task fields

    Returns:
        Created task in pendingApproval

    Raises:
        Forbidden: If the actor is not a company
        InvalidArgument: If a field is out of range
    """
    require_role(actor, UserRole.COMPANY)

    data = task_data.model_dump()
    validate_task_fields(data)

    task = Task(
        company_id=actor.id,
        title=data["title"],
        description=data["description"],
        required_skills=list(data["required_skills"] or []),
        category=data["category"] or "General",
        duration=data["duration"],
        payment_amount=data["payment_amount"],
        deadline=data["deadline"],
        number_of_workers=data["number_of_workers"],
        assigned_workers=[],
        status=TaskStatus.PENDING_APPROVAL.value,
    )
    task.touch()

    db.add(task)
    await db.commit()
    await db.refresh(task)

    await record_transition(db, "task_created", actor.id, task.id, {
        "title": task.title,
        "payment_amount": str(task.payment_amount),
        "status": task.status,
    })

    return task


async def update_task(db: AsyncSession, task_id: str, actor: Actor, updates: TaskUpdate) -> Task:
    """
    Edit a task that has not been published yet.

    A rejected task that is edited goes back into the approval queue with its
    rejection reason cleared.

    Raises:
        NotFound: If the task does not exist
        Forbidden: If the actor is not the owning company
        InvalidTransition: If the task is already open or further along
    """
    require_role(actor, UserRole.COMPANY)
    task = await repository.require_task(db, task_id)
    require_ownership(actor, task.company_id, "task")
    require_status(task.status, EDITABLE_STATUSES, "task")

    # Absent and explicit null fields are both left untouched
    update_data = {
        field: value
        for field, value in updates.model_dump(exclude_unset=True).items()
        if value is not None
    }
    validate_task_fields(update_data)

    for field, value in update_data.items():
        setattr(task, field, value)

    resubmitted = task.status == TaskStatus.REJECTED.value
    if resubmitted:
        task.status = TaskStatus.PENDING_APPROVAL.value
        task.rejection_reason = ""

    task.touch()
    await db.commit()
    await db.refresh(task)

    await record_transition(db, "task_updated", actor.id, task.id, {
        "fields": sorted(update_data),
        "status": task.status,
        "resubmitted": resubmitted,
    })

    return task


async def approve_task(db: AsyncSession, task_id: str, actor: Actor) -> Task:
    """Publish a task waiting for approval so workers can apply."""
    require_role(actor, UserRole.ADMIN)
    task = await repository.require_task(db, task_id)
    require_status(task.status, [TaskStatus.PENDING_APPROVAL], "task")

    task.status = TaskStatus.OPEN.value
    task.touch()
    await db.commit()
    await db.refresh(task)

    await record_transition(db, "task_approved", actor.id, task.id, {"status": task.status})

    return task


async def reject_task(
    db: AsyncSession,
    task_id: str,
    actor: Actor,
    reason: Optional[str] = None
) -> Task:
    """Send a task waiting for approval back to its company with a reason."""
    require_role(actor, UserRole.ADMIN)
    task = await repository.require_task(db, task_id)
    require_status(task.status, [TaskStatus.PENDING_APPROVAL], "task")

    task.status = TaskStatus.REJECTED.value
    task.rejection_reason = (reason or "").strip() or settings.DEFAULT_REJECTION_REASON
    task.touch()
    await db.commit()
    await db.refresh(task)

    await record_transition(db, "task_rejected", actor.id, task.id, {
        "status": task.status,
        "reason": task.rejection_reason,
    })

    return task


async def delete_task(db: AsyncSession, task_id: str, actor: Actor) -> None:
    """
    Delete a task with its applications and submissions. Payments are kept.

    Dependents are removed first and every step commits on its own, so a
    failure part-way leaves the task in place and the call can be retried.

    Raises:
        NotFound: If the task does not exist
        Forbidden: If the actor is not an admin
    """
    require_role(actor, UserRole.ADMIN)
    task = await repository.require_task(db, task_id)
    task_id = task.id

    removed: Dict[str, int] = {}
    try:
        removed["applications"] = await repository.delete_applications_for_task(db, task_id)
        await db.commit()
        logger.info(f"Deleted {removed['applications']} applications of task {task_id}")

        removed["submissions"] = await repository.delete_submissions_for_task(db, task_id)
        await db.commit()
        logger.info(f"Deleted {removed['submissions']} submissions of task {task_id}")
    except Exception:
        await db.rollback()
        logger.error(f"Deleting dependents of task {task_id} failed; task left in place", exc_info=True)
        raise

    try:
        await db.delete(task)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"Deleting task {task_id} failed after its dependents were removed", exc_info=True)
        raise

    await record_transition(db, "task_deleted", actor.id, task_id, removed)


async def list_company_tasks(
    db: AsyncSession,
    actor: Actor,
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Task], int]:
    """List the acting company's own tasks, newest first."""
    require_role(actor, UserRole.COMPANY)
    return await _list_tasks(db, status=status, company_id=actor.id, limit=limit, offset=offset)


async def list_all_tasks(
    db: AsyncSession,
    actor: Actor,
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Task], int]:
    """Admin view over every task."""
    require_role(actor, UserRole.ADMIN)
    return await _list_tasks(db, status=status, limit=limit, offset=offset)


async def _list_tasks(
    db: AsyncSession,
    status: Optional[str] = None,
    company_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Task], int]:
    conditions = []
    if status:
        conditions.append(Task.status == status)
    if company_id:
        conditions.append(Task.company_id == company_id)

    total = await db.scalar(select(func.count()).select_from(Task).where(*conditions))
    result = await db.execute(
        select(Task)
        .where(*conditions)
        .order_by(Task.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def get_company_task(db: AsyncSession, task_id: str, actor: Actor) -> Task:
    require_role(actor, UserRole.COMPANY)
    task = await repository.require_task(db, task_id)
    require_ownership(actor, task.company_id, "task")
    return task


async def get_open_task(db: AsyncSession, task_id: str) -> Task:
    """
    Public task lookup. Only open tasks are visible.

    Raises:
        NotFound: If the task does not exist
        Forbidden: If the task is not open
    """
    task = await repository.require_task(db, task_id)
    if task.status != TaskStatus.OPEN.value:
        raise Forbidden("Task is not available", entity="task", field="status")
    return task


async def list_assigned_tasks(db: AsyncSession, actor: Actor) -> List[Task]:
    """Tasks the worker is assigned to that still need work, soonest deadline first."""
    require_role(actor, UserRole.WORKER)
    result = await db.execute(
        select(Task)
        .where(Task.status.in_([TaskStatus.ASSIGNED.value, TaskStatus.SUBMITTED.value]))
        .order_by(Task.deadline.asc())
    )
    # assigned_workers is a JSON list; membership is checked in Python
    return [task for task in result.scalars().all() if actor.id in (task.assigned_workers or [])]
