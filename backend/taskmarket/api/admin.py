"""Admin API router: task moderation, payment corrections, company verification and user management."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.database import get_db
from taskmarket.api.deps import get_admin
from taskmarket.schemas.payment import PaymentAdjust, PaymentResponse
from taskmarket.schemas.profile import CompanyListResponse, CompanyProfileResponse, CompanyVerify
from taskmarket.schemas.task import TaskListResponse, TaskReject, TaskResponse
from taskmarket.schemas.user import (
    UserFilters,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
    UserStatusUpdate,
)
from taskmarket.services import payment_service, profile_service, task_service, user_service
from taskmarket.services.access_policy import Actor

router = APIRouter()


# Tasks

@router.get("/tasks", response_model=TaskListResponse)
async def list_tasks(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    items, total = await task_service.list_all_tasks(
        db, actor, status=status_filter, limit=limit, offset=offset
    )
    return TaskListResponse(
        items=[TaskResponse.model_validate(task) for task in items],
        total=total,
        limit=limit,
        offset=offset
    )


@router.put("/tasks/{task_id}/approve", response_model=TaskResponse)
async def approve_task(
    task_id: str,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Publish a task that is waiting for approval."""
    return await task_service.approve_task(db, task_id, actor)


@router.put("/tasks/{task_id}/reject", response_model=TaskResponse)
async def reject_task(
    task_id: str,
    rejection: Optional[TaskReject] = None,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Reject a task that is waiting for approval. An empty reason uses the default."""
    reason = rejection.reason if rejection else None
    return await task_service.reject_task(db, task_id, actor, reason)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a task with its applications and submissions. Payments are kept."""
    await task_service.delete_task(db, task_id, actor)


# Payments

@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    return await payment_service.list_all_payments(
        db, actor, status=status_filter, limit=limit, offset=offset
    )


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
async def adjust_payment(
    payment_id: str,
    adjust_data: PaymentAdjust,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Correct the amount or commission of a pending payment."""
    return await payment_service.adjust_payment(db, payment_id, actor, adjust_data)


# Companies

@router.get("/companies", response_model=CompanyListResponse)
async def list_companies(
    verification_status: Optional[str] = Query(None, pattern="^(pending|approved|rejected)$"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    items, total = await profile_service.list_companies(
        db, actor, verification_status=verification_status, limit=limit, offset=offset
    )
    return CompanyListResponse(
        items=[CompanyProfileResponse.model_validate(profile) for profile in items],
        total=total,
        limit=limit,
        offset=offset
    )


@router.put("/companies/{user_id}/verify", response_model=CompanyProfileResponse)
async def verify_company(
    user_id: str,
    update: CompanyVerify,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Approve or reject a company's verification."""
    return await profile_service.verify_company(db, user_id, actor, update.verification_status)


# Users

@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = Query(None, pattern="^(admin|company|worker)$"),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|blocked)$"),
    search: Optional[str] = Query(None, description="Search name or email"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    filters = UserFilters(role=role, status=status_filter, search=search)
    items, total = await user_service.list_users(db, actor, filters, limit=limit, offset=offset)
    return UserListResponse(
        items=[UserResponse.model_validate(user) for user in items],
        total=total,
        limit=limit,
        offset=offset
    )


@router.put("/users/{user_id}/status", response_model=UserResponse)
async def set_user_status(
    user_id: str,
    update: UserStatusUpdate,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Block or reactivate a user."""
    return await user_service.set_user_status(db, user_id, actor, update.status)


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def set_user_role(
    user_id: str,
    update: UserRoleUpdate,
    actor: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    return await user_service.set_user_role(db, user_id, actor, update.role)
