"""API dependencies for authentication and shared query parameters."""

from decimal import Decimal
from typing import Optional

from fastapi import Depends, HTTPException, status, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.database import get_db
from taskmarket.models.user import User, UserRole, UserStatus
from taskmarket.schemas.task import TaskFilters
from taskmarket.services.access_policy import Actor, require_role
from taskmarket.services.user_service import authenticate


async def get_current_user(
    x_api_key: Optional[str] = Header(None, description="API key for authentication"),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency that validates the X-API-Key header and returns the authenticated user.

    Raises:
        HTTPException: 401 if the API key is missing or invalid, 403 if the user is blocked
    """
    user = await authenticate(db, x_api_key) if x_api_key else None

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "INVALID_API_KEY",
                "message": "Invalid API key provided"
            }
        )

    if user.status == UserStatus.BLOCKED.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "USER_BLOCKED",
                "message": "This account has been blocked"
            }
        )

    return user


async def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(user)


async def get_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    require_role(actor, UserRole.ADMIN)
    return actor


async def get_company(actor: Actor = Depends(get_current_actor)) -> Actor:
    require_role(actor, UserRole.COMPANY)
    return actor


async def get_worker(actor: Actor = Depends(get_current_actor)) -> Actor:
    require_role(actor, UserRole.WORKER)
    return actor


def get_task_filters(
    skills: Optional[str] = Query(None, description="Comma-separated skills (any match)"),
    category: Optional[str] = Query(None),
    min_payment: Optional[Decimal] = Query(None, ge=0),
    max_payment: Optional[Decimal] = Query(None, ge=0),
    duration: Optional[int] = Query(None, ge=1, le=3),
    search: Optional[str] = Query(None, description="Search title and description"),
    company_id: Optional[str] = Query(None),
) -> TaskFilters:
    """Discovery filters for open tasks."""
    skills_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else []
    return TaskFilters(
        status="open",
        skills=skills_list,
        category=category,
        min_payment=min_payment,
        max_payment=max_payment,
        duration=duration,
        search=search,
        company_id=company_id,
    )
