"""Worker API router: finding tasks, applying, delivering work and earnings."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.database import get_db
from taskmarket.api.deps import get_task_filters, get_worker
from taskmarket.schemas.application import ApplicationCreate, ApplicationResponse
from taskmarket.schemas.payment import EarningsResponse
from taskmarket.schemas.profile import WorkerProfileResponse, WorkerProfileUpdate
from taskmarket.schemas.submission import SubmissionCreate, SubmissionResponse
from taskmarket.schemas.task import TaskFilters, TaskListResponse, TaskResponse, WorkerTaskResponse
from taskmarket.services import application_service, payment_service, submission_service, task_service
from taskmarket.services.access_policy import Actor
from taskmarket.services.profile_service import get_worker_profile, update_worker_profile
from taskmarket.services.task_search import search_tasks

router = APIRouter()


@router.get("/tasks", response_model=TaskListResponse)
async def browse_tasks(
    filters: TaskFilters = Depends(get_task_filters),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Browse open tasks with the same filters as the public listing."""
    items, total = await search_tasks(db, filters, limit=limit, offset=offset)
    return TaskListResponse(
        items=[TaskResponse.model_validate(task) for task in items],
        total=total,
        limit=limit,
        offset=offset
    )


@router.get("/tasks/assigned", response_model=List[TaskResponse])
async def list_assigned_tasks(
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Tasks you are assigned to that still need work, soonest deadline first."""
    return await task_service.list_assigned_tasks(db, actor)


@router.get("/tasks/{task_id}", response_model=WorkerTaskResponse)
async def get_task(
    task_id: str,
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Get an open task, flagged with whether you already applied."""
    task = await task_service.get_open_task(db, task_id)
    response = WorkerTaskResponse.model_validate(task)
    response.has_applied = await application_service.has_applied(db, task.id, actor.id)
    return response


@router.post(
    "/tasks/{task_id}/apply",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED
)
async def apply_to_task(
    task_id: str,
    application_data: ApplicationCreate,
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    return await application_service.apply_to_task(db, task_id, actor, application_data)


@router.post("/tasks/{task_id}/submit", response_model=SubmissionResponse)
async def submit_work(
    task_id: str,
    submission_data: SubmissionCreate,
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit work for an assigned task.

    Submitting again adds the new files to the earlier ones and puts the
    submission back into review.
    """
    return await submission_service.submit_work(db, task_id, actor, submission_data)


@router.get("/applications", response_model=List[ApplicationResponse])
async def list_my_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    return await application_service.list_worker_applications(db, actor, status=status_filter)


@router.get("/submissions", response_model=List[SubmissionResponse])
async def list_my_submissions(
    review_status: Optional[str] = Query(None),
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    return await submission_service.list_worker_submissions(db, actor, review_status=review_status)


@router.get("/earnings", response_model=EarningsResponse)
async def get_earnings(
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    return await payment_service.get_worker_earnings(db, actor)


@router.get("/profile", response_model=WorkerProfileResponse)
async def get_profile(
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    return await get_worker_profile(db, actor)


@router.put("/profile", response_model=WorkerProfileResponse)
async def update_profile(
    updates: WorkerProfileUpdate,
    actor: Actor = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    return await update_worker_profile(db, actor, updates)
