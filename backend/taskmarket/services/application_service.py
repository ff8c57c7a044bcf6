"""Application service: workers applying to tasks and companies staffing them."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.config import settings
from taskmarket.core.errors import CapacityExceeded, DuplicateApplication, TaskNotOpen
from taskmarket.models.application import Application, ApplicationStatus
from taskmarket.models.task import TaskStatus
from taskmarket.models.user import UserRole
from taskmarket.schemas.application import ApplicationCreate
from taskmarket.services import repository
from taskmarket.services.access_policy import Actor, require_ownership, require_role, require_status
from taskmarket.services.activity_service import record_transition

logger = logging.getLogger(__name__)

# Task statuses in which the company may still take on workers
STAFFABLE_STATUSES = (TaskStatus.OPEN, TaskStatus.ASSIGNED, TaskStatus.SUBMITTED)


async def apply_to_task(
    db: AsyncSession,
    task_id: str,
    actor: Actor,
    application_data: ApplicationCreate
) -> Application:
    """
    Apply to an open task.

    Args:
        db: Database session
        task_id: Task to apply to
        actor: Applying worker
        application_data: Proposal, delivery estimate and optional attachment path

    Returns:
        Created application in status applied

    Raises:
        Forbidden: If the actor is not a worker
        NotFound: If the task does not exist
        TaskNotOpen: If the task is not open for applications
        DuplicateApplication: If the worker already applied to this task
    """
    require_role(actor, UserRole.WORKER)
    task = await repository.require_task(db, task_id)

    if task.status != TaskStatus.OPEN.value:
        raise TaskNotOpen(
            f"Task is not open for applications (status '{task.status}')",
            entity="task",
            field="status",
        )

    if await repository.find_application(db, task.id, actor.id):
        raise DuplicateApplication(
            "You have already applied to this task",
            entity="application",
            field="task_id",
        )

    application = Application(
        task_id=task.id,
        worker_id=actor.id,
        proposal=application_data.proposal,
        expected_delivery_time=application_data.expected_delivery_time,
        attachment=application_data.attachment or "",
        status=ApplicationStatus.APPLIED.value,
    )
    db.add(application)

    try:
        await db.commit()
    except IntegrityError:
        # Concurrent apply for the same pair lost the race on the unique constraint
        await db.rollback()
        raise DuplicateApplication(
            "You have already applied to this task",
            entity="application",
            field="task_id",
        )
    await db.refresh(application)

    await record_transition(db, "application_submitted", actor.id, task.id, {
        "application_id": application.id,
        "worker_id": actor.id,
    })

    return application


async def accept_application(db: AsyncSession, application_id: str, actor: Actor) -> Application:
    """
    Accept a worker's application and assign them to the task.

    The first acceptance moves an open task to assigned. Accepting more workers
    than the task asked for is refused while ENFORCE_TASK_CAPACITY is on.

    Raises:
        NotFound: If the application or its task does not exist
        Forbidden: If the actor does not own the task
        InvalidTransition: If the application was already decided or the task
            is no longer staffable
        CapacityExceeded: If the task already has all the workers it asked for
    """
    require_role(actor, UserRole.COMPANY)
    application = await repository.require_application(db, application_id)
    task = await repository.require_task(db, application.task_id)
    require_ownership(actor, task.company_id, "task")
    require_status(application.status, [ApplicationStatus.APPLIED], "application")
    require_status(task.status, STAFFABLE_STATUSES, "task")

    assigned = list(task.assigned_workers or [])
    already_assigned = application.worker_id in assigned
    if (
        settings.ENFORCE_TASK_CAPACITY
        and not already_assigned
        and len(assigned) >= task.number_of_workers
    ):
        raise CapacityExceeded(
            f"Task already has {len(assigned)} of {task.number_of_workers} workers",
            entity="task",
            field="number_of_workers",
        )

    application.status = ApplicationStatus.ACCEPTED.value
    if not already_assigned:
        # Reassign so the JSON column change is detected
        task.assigned_workers = assigned + [application.worker_id]
    if task.status == TaskStatus.OPEN.value:
        task.status = TaskStatus.ASSIGNED.value
    task.touch()

    await db.commit()
    await db.refresh(application)

    await record_transition(db, "application_accepted", actor.id, task.id, {
        "application_id": application.id,
        "worker_id": application.worker_id,
        "task_status": task.status,
    })

    return application


async def reject_application(db: AsyncSession, application_id: str, actor: Actor) -> Application:
    """Decline a pending application. The task is not affected."""
    require_role(actor, UserRole.COMPANY)
    application = await repository.require_application(db, application_id)
    task = await repository.require_task(db, application.task_id)
    require_ownership(actor, task.company_id, "task")
    require_status(application.status, [ApplicationStatus.APPLIED], "application")

    application.status = ApplicationStatus.REJECTED.value
    await db.commit()
    await db.refresh(application)

    await record_transition(db, "application_rejected", actor.id, task.id, {
        "application_id": application.id,
        "worker_id": application.worker_id,
    })

    return application


async def list_task_applications(db: AsyncSession, task_id: str, actor: Actor) -> List[Application]:
    """Applications received for one of the acting company's tasks."""
    require_role(actor, UserRole.COMPANY)
    task = await repository.require_task(db, task_id)
    require_ownership(actor, task.company_id, "task")

    result = await db.execute(
        select(Application)
        .where(Application.task_id == task.id)
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def list_worker_applications(
    db: AsyncSession,
    actor: Actor,
    status: Optional[str] = None
) -> List[Application]:
    require_role(actor, UserRole.WORKER)
    query = select(Application).where(Application.worker_id == actor.id)
    if status:
        query = query.where(Application.status == status)
    result = await db.execute(query.order_by(Application.created_at.desc()))
    return list(result.scalars().all())


async def has_applied(db: AsyncSession, task_id: str, worker_id: str) -> bool:
    return await repository.find_application(db, task_id, worker_id) is not None
