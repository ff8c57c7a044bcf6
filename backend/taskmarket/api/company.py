"""Company API router: posting tasks, staffing them, reviewing work and paying."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.database import get_db
from taskmarket.api.deps import get_company
from taskmarket.schemas.application import ApplicationResponse
from taskmarket.schemas.payment import PaymentConfirm, PaymentResponse
from taskmarket.schemas.profile import CompanyProfileResponse, CompanyProfileUpdate
from taskmarket.schemas.submission import SubmissionResponse, SubmissionReview
from taskmarket.schemas.task import TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from taskmarket.services import application_service, payment_service, submission_service, task_service
from taskmarket.services.access_policy import Actor
from taskmarket.services.profile_service import get_company_profile, update_company_profile

router = APIRouter()


# Tasks

@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    """Post a new task. It is queued for admin approval."""
    return await task_service.create_task(db, actor, task_data)


@router.get("/tasks", response_model=TaskListResponse)
async def list_my_tasks(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    items, total = await task_service.list_company_tasks(
        db, actor, status=status_filter, limit=limit, offset=offset
    )
    return TaskListResponse(
        items=[TaskResponse.model_validate(task) for task in items],
        total=total,
        limit=limit,
        offset=offset
    )


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_my_task(
    task_id: str,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await task_service.get_company_task(db, task_id, actor)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    updates: TaskUpdate,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    """
    Edit a task before it is published.

    Editing a rejected task sends it back for approval.
    """
    return await task_service.update_task(db, task_id, actor, updates)


@router.get("/tasks/{task_id}/applications", response_model=List[ApplicationResponse])
async def list_task_applications(
    task_id: str,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await application_service.list_task_applications(db, task_id, actor)


@router.get("/tasks/{task_id}/submissions", response_model=List[SubmissionResponse])
async def list_task_submissions(
    task_id: str,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await submission_service.list_task_submissions(db, task_id, actor)


# Applications

@router.put("/applications/{application_id}/accept", response_model=ApplicationResponse)
async def accept_application(
    application_id: str,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    """Accept an application and assign the worker to the task."""
    return await application_service.accept_application(db, application_id, actor)


@router.put("/applications/{application_id}/reject", response_model=ApplicationResponse)
async def reject_application(
    application_id: str,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await application_service.reject_application(db, application_id, actor)


# Submissions

@router.put("/submissions/{submission_id}/review", response_model=SubmissionResponse)
async def review_submission(
    submission_id: str,
    review: SubmissionReview,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    """
    Review submitted work.

    review_status is one of accepted, rejected or revisionRequested. Accepting
    completes the task and creates a pending payment for the worker.
    """
    return await submission_service.review_submission(
        db, submission_id, actor, review.review_status, review.review_notes
    )


# Payments

@router.get("/payments", response_model=List[PaymentResponse])
async def list_my_payments(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await payment_service.list_company_payments(db, actor, status=status_filter)


@router.put("/payments/{payment_id}/confirm", response_model=PaymentResponse)
async def confirm_payment(
    payment_id: str,
    confirm_data: Optional[PaymentConfirm] = None,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    """Confirm that the worker has been paid. Proof and transaction id are optional."""
    return await payment_service.confirm_payment(db, payment_id, actor, confirm_data)


# Profile

@router.get("/profile", response_model=CompanyProfileResponse)
async def get_profile(
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await get_company_profile(db, actor)


@router.put("/profile", response_model=CompanyProfileResponse)
async def update_profile(
    updates: CompanyProfileUpdate,
    actor: Actor = Depends(get_company),
    db: AsyncSession = Depends(get_db)
):
    return await update_company_profile(db, actor, updates)
