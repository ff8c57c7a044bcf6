"""Tests for task posting, moderation and deletion."""

from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.core.errors import Forbidden, InvalidArgument, InvalidTransition, NotFound
from taskmarket.models.activity_log import ActivityLog
from taskmarket.models.application import Application
from taskmarket.models.payment import Payment
from taskmarket.models.submission import Submission
from taskmarket.models.task import Task
from taskmarket.schemas.application import ApplicationCreate
from taskmarket.schemas.submission import SubmissionCreate
from taskmarket.schemas.task import TaskCreate, TaskUpdate
from taskmarket.services import repository, task_service
from taskmarket.services.application_service import accept_application, apply_to_task
from taskmarket.services.submission_service import review_submission, submit_work

from conftest import new_task


@pytest.mark.asyncio
async def test_create_task_starts_pending_approval(db: AsyncSession, company):
    task = await task_service.create_task(db, company, new_task())

    assert task.status == "pendingApproval"
    assert task.company_id == company.id
    assert task.assigned_workers == []
    assert task.rejection_reason == ""


@pytest.mark.asyncio
async def test_create_task_ignores_client_status(db: AsyncSession, company):
    data = new_task().model_dump()
    data["status"] = "open"
    task_data = TaskCreate.model_validate(data)

    task = await task_service.create_task(db, company, task_data)

    assert task.status == "pendingApproval"


@pytest.mark.asyncio
async def test_create_task_defaults(db: AsyncSession, company):
    minimal = TaskCreate(
        title="Quick survey",
        description="Answer 10 questions",
        payment_amount=Decimal("5"),
        deadline=new_task().deadline,
    )

    task = await task_service.create_task(db, company, minimal)

    assert task.category == "General"
    assert task.duration == 1
    assert task.number_of_workers == 1
    assert task.required_skills == []


@pytest.mark.asyncio
async def test_only_companies_create_tasks(db: AsyncSession, worker):
    with pytest.raises(Forbidden):
        await task_service.create_task(db, worker, new_task())


@pytest.mark.asyncio
async def test_approve_moves_pending_to_open(db: AsyncSession, company, admin):
    task = await task_service.create_task(db, company, new_task())

    approved = await task_service.approve_task(db, task.id, admin)

    assert approved.status == "open"


@pytest.mark.asyncio
async def test_approve_requires_pending_approval(db: AsyncSession, open_task, admin):
    with pytest.raises(InvalidTransition):
        await task_service.approve_task(db, open_task.id, admin)


@pytest.mark.asyncio
async def test_approve_requires_admin(db: AsyncSession, company):
    task = await task_service.create_task(db, company, new_task())

    with pytest.raises(Forbidden):
        await task_service.approve_task(db, task.id, company)


@pytest.mark.asyncio
async def test_approve_unknown_task(db: AsyncSession, admin):
    with pytest.raises(NotFound) as exc_info:
        await task_service.approve_task(db, "missing", admin)

    assert exc_info.value.code == "TASK_NOT_FOUND"


@pytest.mark.asyncio
async def test_reject_stores_reason(db: AsyncSession, company, admin):
    task = await task_service.create_task(db, company, new_task())

    rejected = await task_service.reject_task(db, task.id, admin, "incomplete spec")

    assert rejected.status == "rejected"
    assert rejected.rejection_reason == "incomplete spec"


@pytest.mark.asyncio
async def test_reject_without_reason_uses_default(db: AsyncSession, company, admin):
    task = await task_service.create_task(db, company, new_task())

    rejected = await task_service.reject_task(db, task.id, admin, "")

    assert rejected.rejection_reason == "Rejected by admin"


@pytest.mark.asyncio
async def test_reject_requires_pending_approval(db: AsyncSession, open_task, admin):
    with pytest.raises(InvalidTransition):
        await task_service.reject_task(db, open_task.id, admin, "too late")


@pytest.mark.asyncio
async def test_update_rejected_task_resubmits(db: AsyncSession, company, admin):
    task = await task_service.create_task(db, company, new_task())
    await task_service.reject_task(db, task.id, admin, "incomplete spec")

    updated = await task_service.update_task(
        db, task.id, company, TaskUpdate(description="Transcribe, with timestamps")
    )

    assert updated.status == "pendingApproval"
    assert updated.rejection_reason == ""
    assert updated.description == "Transcribe, with timestamps"


@pytest.mark.asyncio
async def test_update_ignores_absent_and_null_fields(db: AsyncSession, company):
    task = await task_service.create_task(db, company, new_task())

    updated = await task_service.update_task(
        db, task.id, company, TaskUpdate(title="New title", description=None)
    )

    assert updated.title == "New title"
    assert updated.description == "Transcribe a 20 minute interview"
    assert updated.payment_amount == Decimal("100.00")
    assert updated.status == "pendingApproval"


@pytest.mark.asyncio
async def test_update_by_other_company_forbidden(db: AsyncSession, company, other_company):
    task = await task_service.create_task(db, company, new_task())

    with pytest.raises(Forbidden):
        await task_service.update_task(db, task.id, other_company, TaskUpdate(title="Mine now"))


@pytest.mark.asyncio
async def test_update_open_task_refused(db: AsyncSession, company, open_task):
    with pytest.raises(InvalidTransition):
        await task_service.update_task(db, open_task.id, company, TaskUpdate(title="Too late"))


def test_validate_task_fields_rejects_out_of_range():
    with pytest.raises(InvalidArgument) as exc_info:
        task_service.validate_task_fields({"duration": 4})
    assert exc_info.value.field == "duration"

    with pytest.raises(InvalidArgument):
        task_service.validate_task_fields({"payment_amount": Decimal("-1")})

    with pytest.raises(InvalidArgument):
        task_service.validate_task_fields({"title": "  "})


@pytest.mark.asyncio
async def test_delete_task_removes_dependents_and_keeps_payments(
    db: AsyncSession, company, worker, admin, open_task
):
    application = await apply_to_task(
        db, open_task.id, worker,
        ApplicationCreate(proposal="I type fast", expected_delivery_time="1 day")
    )
    await accept_application(db, application.id, company)
    submission = await submit_work(db, open_task.id, worker, SubmissionCreate(description="done"))
    await review_submission(db, submission.id, company, "accepted")

    await task_service.delete_task(db, open_task.id, admin)

    assert (await db.execute(select(Task).where(Task.id == open_task.id))).scalar_one_or_none() is None
    assert (await db.execute(
        select(Application).where(Application.task_id == open_task.id)
    )).scalars().all() == []
    assert (await db.execute(
        select(Submission).where(Submission.task_id == open_task.id)
    )).scalars().all() == []
    payments = (await db.execute(
        select(Payment).where(Payment.task_id == open_task.id)
    )).scalars().all()
    assert len(payments) == 1


@pytest.mark.asyncio
async def test_delete_requires_admin(db: AsyncSession, company, open_task):
    with pytest.raises(Forbidden):
        await task_service.delete_task(db, open_task.id, company)


@pytest.mark.asyncio
async def test_transitions_write_activity_log(db: AsyncSession, company, admin):
    task = await task_service.create_task(db, company, new_task())
    await task_service.approve_task(db, task.id, admin)

    result = await db.execute(
        select(ActivityLog.event_type)
        .where(ActivityLog.task_id == task.id)
        .order_by(ActivityLog.id)
    )
    assert list(result.scalars().all()) == ["task_created", "task_approved"]


@pytest.mark.asyncio
async def test_get_open_task_hides_unpublished(db: AsyncSession, company):
    task = await task_service.create_task(db, company, new_task())

    with pytest.raises(Forbidden):
        await task_service.get_open_task(db, task.id)


@pytest.mark.asyncio
async def test_list_company_tasks_only_own(db: AsyncSession, company, other_company):
    await task_service.create_task(db, company, new_task(title="Mine"))
    await task_service.create_task(db, other_company, new_task(title="Theirs"))

    items, total = await task_service.list_company_tasks(db, company)

    assert total == 1
    assert [task.title for task in items] == ["Mine"]


@pytest.mark.asyncio
async def test_delete_interrupted_leaves_task_and_retry_finishes(
    db: AsyncSession, company, worker, admin, open_task, monkeypatch
):
    application = await apply_to_task(
        db, open_task.id, worker,
        ApplicationCreate(proposal="I type fast", expected_delivery_time="1 day")
    )
    await accept_application(db, application.id, company)
    await submit_work(db, open_task.id, worker, SubmissionCreate(description="draft"))

    original = repository.delete_submissions_for_task

    async def broken(db, task_id):
        raise RuntimeError("disk full")

    monkeypatch.setattr(repository, "delete_submissions_for_task", broken)
    with pytest.raises(RuntimeError):
        await task_service.delete_task(db, open_task.id, admin)

    assert (await db.execute(select(Task).where(Task.id == open_task.id))).scalar_one_or_none() is not None
    assert (await db.execute(
        select(Application).where(Application.task_id == open_task.id)
    )).scalars().all() == []
    assert len((await db.execute(
        select(Submission).where(Submission.task_id == open_task.id)
    )).scalars().all()) == 1

    monkeypatch.setattr(repository, "delete_submissions_for_task", original)
    await task_service.delete_task(db, open_task.id, admin)

    assert (await db.execute(select(Task).where(Task.id == open_task.id))).scalar_one_or_none() is None
    assert (await db.execute(
        select(Submission).where(Submission.task_id == open_task.id)
    )).scalars().all() == []
