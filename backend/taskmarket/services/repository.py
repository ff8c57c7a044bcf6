"""Entity lookups shared by the workflow services."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.core.errors import NotFound
from taskmarket.models.application import Application
from taskmarket.models.payment import Payment
from taskmarket.models.profile import CompanyProfile, WorkerProfile
from taskmarket.models.submission import Submission
from taskmarket.models.task import Task
from taskmarket.models.user import User


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_task_by_id(db: AsyncSession, task_id: str) -> Optional[Task]:
    result = await db.execute(select(Task).where(Task.id == task_id))
    return result.scalar_one_or_none()


async def get_application_by_id(db: AsyncSession, application_id: str) -> Optional[Application]:
    result = await db.execute(select(Application).where(Application.id == application_id))
    return result.scalar_one_or_none()


async def get_submission_by_id(db: AsyncSession, submission_id: str) -> Optional[Submission]:
    result = await db.execute(select(Submission).where(Submission.id == submission_id))
    return result.scalar_one_or_none()


async def get_payment_by_id(db: AsyncSession, payment_id: str) -> Optional[Payment]:
    result = await db.execute(select(Payment).where(Payment.id == payment_id))
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: str) -> User:
    user = await get_user_by_id(db, user_id)
    if not user:
        raise NotFound("user", user_id)
    return user


async def require_task(db: AsyncSession, task_id: str) -> Task:
    task = await get_task_by_id(db, task_id)
    if not task:
        raise NotFound("task", task_id)
    return task


async def require_application(db: AsyncSession, application_id: str) -> Application:
    application = await get_application_by_id(db, application_id)
    if not application:
        raise NotFound("application", application_id)
    return application


async def require_submission(db: AsyncSession, submission_id: str) -> Submission:
    submission = await get_submission_by_id(db, submission_id)
    if not submission:
        raise NotFound("submission", submission_id)
    return submission


async def require_payment(db: AsyncSession, payment_id: str) -> Payment:
    payment = await get_payment_by_id(db, payment_id)
    if not payment:
        raise NotFound("payment", payment_id)
    return payment


async def find_application(db: AsyncSession, task_id: str, worker_id: str) -> Optional[Application]:
    result = await db.execute(
        select(Application).where(
            Application.task_id == task_id,
            Application.worker_id == worker_id,
        )
    )
    return result.scalar_one_or_none()


async def find_submission(db: AsyncSession, task_id: str, worker_id: str) -> Optional[Submission]:
    result = await db.execute(
        select(Submission).where(
            Submission.task_id == task_id,
            Submission.worker_id == worker_id,
        )
    )
    return result.scalar_one_or_none()


async def get_worker_profile(db: AsyncSession, user_id: str) -> Optional[WorkerProfile]:
    result = await db.execute(select(WorkerProfile).where(WorkerProfile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_company_profile(db: AsyncSession, user_id: str) -> Optional[CompanyProfile]:
    result = await db.execute(select(CompanyProfile).where(CompanyProfile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_worker_profile(db: AsyncSession, user_id: str) -> WorkerProfile:
    """Return the worker's profile, adding an empty one to the session if missing."""
    profile = await get_worker_profile(db, user_id)
    if profile is None:
        profile = WorkerProfile(user_id=user_id)
        db.add(profile)
        await db.flush()
    return profile


async def get_or_create_company_profile(db: AsyncSession, user_id: str) -> CompanyProfile:
    profile = await get_company_profile(db, user_id)
    if profile is None:
        profile = CompanyProfile(user_id=user_id)
        db.add(profile)
        await db.flush()
    return profile


async def delete_applications_for_task(db: AsyncSession, task_id: str) -> int:
    """Delete all applications of a task. Returns the number of rows removed."""
    result = await db.execute(delete(Application).where(Application.task_id == task_id))
    return result.rowcount or 0


async def delete_submissions_for_task(db: AsyncSession, task_id: str) -> int:
    result = await db.execute(delete(Submission).where(Submission.task_id == task_id))
    return result.rowcount or 0
