"""Public tasks API router: browsing open tasks."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.database import get_db
from taskmarket.api.deps import get_task_filters
from taskmarket.schemas.task import TaskFilters, TaskListResponse, TaskResponse
from taskmarket.services.task_search import list_categories, list_skills, search_tasks
from taskmarket.services.task_service import get_open_task

router = APIRouter()


@router.get("", response_model=TaskListResponse)
async def browse_tasks(
    filters: TaskFilters = Depends(get_task_filters),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db)
):
    """
    Browse open tasks (public endpoint).

    Filters: skills (comma-separated, any match), category, min_payment,
    max_payment, duration, search, company_id.
    """
    items, total = await search_tasks(db, filters, limit=limit, offset=offset)
    return TaskListResponse(
        items=[TaskResponse.model_validate(task) for task in items],
        total=total,
        limit=limit,
        offset=offset
    )


@router.get("/categories/list", response_model=List[str])
async def get_categories(db: AsyncSession = Depends(get_db)):
    return await list_categories(db)


@router.get("/skills/list", response_model=List[str])
async def get_skills(db: AsyncSession = Depends(get_db)):
    return await list_skills(db)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, db: AsyncSession = Depends(get_db)):
    """Get an open task. Tasks in any other status are not public."""
    return await get_open_task(db, task_id)
