"""Submission service: delivering work and reviewing it."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.core.errors import Forbidden, InvalidReviewStatus
from taskmarket.models.submission import Submission, ReviewStatus, REVIEW_DECISIONS
from taskmarket.models.task import TaskStatus
from taskmarket.models.user import UserRole
from taskmarket.schemas.submission import SubmissionCreate
from taskmarket.services import repository
from taskmarket.services.access_policy import Actor, require_ownership, require_role, require_status
from taskmarket.services.activity_service import record_transition
from taskmarket.services.payment_service import create_payment

logger = logging.getLogger(__name__)

# Task statuses in which assigned workers may (re)submit
SUBMITTABLE_STATUSES = (TaskStatus.ASSIGNED, TaskStatus.SUBMITTED)


async def submit_work(
    db: AsyncSession,
    task_id: str,
    actor: Actor,
    submission_data: SubmissionCreate
) -> Submission:
    """
    Submit work for an assigned task, or resubmit after review.

    A resubmission appends the new files to the existing ones, replaces the
    description when one is given and puts the submission back into review.

    Args:
        db: Database session
        task_id: Task UUID
        actor: Submitting worker
        submission_data: Description and file references

    Returns:
        The created or updated submission

    Raises:
        NotFound: If the task does not exist
        Forbidden: If the worker is not assigned to the task
        InvalidTransition: If the task is not awaiting work
    """
    require_role(actor, UserRole.WORKER)
    task = await repository.require_task(db, task_id)

    if actor.id not in (task.assigned_workers or []):
        raise Forbidden(
            "You are not assigned to this task",
            entity="task",
            field="assigned_workers",
        )
    require_status(task.status, SUBMITTABLE_STATUSES, "task")

    new_files = [file.model_dump(mode="json") for file in submission_data.files]
    submission = await repository.find_submission(db, task.id, actor.id)
    resubmitted = submission is not None

    if submission:
        submission.files = list(submission.files or []) + new_files
        submission.description = submission_data.description or submission.description
        submission.submitted_at = datetime.utcnow()
        submission.review_status = ReviewStatus.PENDING.value
    else:
        submission = Submission(
            task_id=task.id,
            worker_id=actor.id,
            files=new_files,
            description=submission_data.description or "",
            submitted_at=datetime.utcnow(),
            review_status=ReviewStatus.PENDING.value,
        )
        db.add(submission)

    task.status = TaskStatus.SUBMITTED.value
    task.touch()

    await db.commit()
    await db.refresh(submission)

    await record_transition(db, "work_submitted", actor.id, task.id, {
        "submission_id": submission.id,
        "files": len(submission.files),
        "resubmitted": resubmitted,
    })

    return submission


async def review_submission(
    db: AsyncSession,
    submission_id: str,
    actor: Actor,
    review_status: str,
    review_notes: Optional[str] = None
) -> Submission:
    """
    Review a pending submission.

    revisionRequested bumps the revision count. accepted completes the task,
    credits the worker's completed-task counter and creates a pending payment.
    Those three follow-up steps commit one after another; if a later one fails
    the earlier ones stay in place and the failure is logged.

    Raises:
        InvalidReviewStatus: If review_status is not a review decision
        NotFound: If the submission or its task does not exist
        Forbidden: If the actor does not own the task
        InvalidTransition: If the submission is not pending review
    """
    require_role(actor, UserRole.COMPANY)
    decisions = [decision.value for decision in REVIEW_DECISIONS]
    if review_status not in decisions:
        raise InvalidReviewStatus(
            f"Invalid review status '{review_status}' (expected {', '.join(decisions)})",
            entity="submission",
            field="review_status",
        )

    submission = await repository.require_submission(db, submission_id)
    task = await repository.require_task(db, submission.task_id)
    require_ownership(actor, task.company_id, "task")
    require_status(submission.review_status, [ReviewStatus.PENDING], "submission", field="review_status")

    submission.review_status = review_status
    submission.review_notes = review_notes or ""
    if review_status == ReviewStatus.REVISION_REQUESTED.value:
        submission.revision_count = (submission.revision_count or 0) + 1

    await db.commit()
    await db.refresh(submission)

    await record_transition(db, "submission_reviewed", actor.id, task.id, {
        "submission_id": submission.id,
        "worker_id": submission.worker_id,
        "review_status": submission.review_status,
        "revision_count": submission.revision_count,
    })

    if review_status != ReviewStatus.ACCEPTED.value:
        return submission

    step = "complete task"
    try:
        task.status = TaskStatus.COMPLETED.value
        task.touch()
        await db.commit()
        logger.info(f"Task {task.id} completed")

        step = "credit worker"
        profile = await repository.get_or_create_worker_profile(db, submission.worker_id)
        profile.completed_tasks = (profile.completed_tasks or 0) + 1
        await db.commit()
        logger.info(f"Worker {submission.worker_id} completed_tasks={profile.completed_tasks}")

        step = "create payment"
        await create_payment(db, task, submission)
    except Exception:
        await db.rollback()
        logger.error(
            f"Accepting submission {submission.id} failed at step '{step}'; earlier steps were kept",
            exc_info=True
        )
        raise

    await record_transition(db, "task_completed", actor.id, task.id, {
        "submission_id": submission.id,
        "worker_id": submission.worker_id,
    })

    return submission


async def list_task_submissions(db: AsyncSession, task_id: str, actor: Actor) -> List[Submission]:
    """Submissions received for one of the acting company's tasks."""
    require_role(actor, UserRole.COMPANY)
    task = await repository.require_task(db, task_id)
    require_ownership(actor, task.company_id, "task")

    result = await db.execute(
        select(Submission)
        .where(Submission.task_id == task.id)
        .order_by(Submission.submitted_at.desc())
    )
    return list(result.scalars().all())


async def list_worker_submissions(
    db: AsyncSession,
    actor: Actor,
    review_status: Optional[str] = None
) -> List[Submission]:
    require_role(actor, UserRole.WORKER)
    query = select(Submission).where(Submission.worker_id == actor.id)
    if review_status:
        query = query.where(Submission.review_status == review_status)
    result = await db.execute(query.order_by(Submission.submitted_at.desc()))
    return list(result.scalars().all())
