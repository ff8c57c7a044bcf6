"""Task discovery: filter predicates, search and facet lists."""

import json
from typing import List, Tuple

from sqlalchemy import String, and_, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from taskmarket.models.task import Task
from taskmarket.schemas.task import TaskFilters

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    for char in (LIKE_ESCAPE, "%", "_"):
        value = value.replace(char, LIKE_ESCAPE + char)
    return value


def skill_pattern(skill: str) -> str:
    """
    LIKE pattern matching one whole element of the stored required_skills array.

    The column holds json.dumps output, so the skill is encoded the same way
    (quotes and \\uXXXX escapes included) before wildcards are escaped.
    Matching is done on lowercased text on both sides.
    """
    return f"%{escape_like(json.dumps(skill.lower()))}%"


def build_task_filters(filters: TaskFilters) -> List[ColumnElement]:
    """
    Translate discovery filters into SQLAlchemy predicates.

    Skills match any-of. min/max payment are inclusive. Search is one
    case-insensitive substring matched against title or description.
    """
    conditions: List[ColumnElement] = []

    if filters.status:
        conditions.append(Task.status == filters.status)

    if filters.company_id:
        conditions.append(Task.company_id == filters.company_id)

    skills = [skill.strip() for skill in filters.skills if skill and skill.strip()]
    if skills:
        skills_text = func.lower(cast(Task.required_skills, String))
        conditions.append(or_(*[
            skills_text.like(skill_pattern(skill), escape=LIKE_ESCAPE) for skill in skills
        ]))

    if filters.category:
        conditions.append(Task.category == filters.category)

    if filters.min_payment is not None:
        conditions.append(Task.payment_amount >= filters.min_payment)
    if filters.max_payment is not None:
        conditions.append(Task.payment_amount <= filters.max_payment)

    if filters.duration is not None:
        conditions.append(Task.duration == filters.duration)

    search = (filters.search or "").strip()
    if search:
        pattern = f"%{escape_like(search)}%"
        conditions.append(or_(
            Task.title.ilike(pattern, escape=LIKE_ESCAPE),
            Task.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    return conditions


async def search_tasks(
    db: AsyncSession,
    filters: TaskFilters,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[Task], int]:
    """
    Search tasks, newest first.

    Returns:
        Tuple of (page of tasks, total matching count)
    """
    conditions = build_task_filters(filters)
    where = and_(*conditions) if conditions else None

    count_query = select(func.count()).select_from(Task)
    query = select(Task)
    if where is not None:
        count_query = count_query.where(where)
        query = query.where(where)

    total = await db.scalar(count_query)
    result = await db.execute(
        query.order_by(Task.created_at.desc()).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def list_categories(db: AsyncSession) -> List[str]:
    result = await db.execute(select(Task.category).distinct().order_by(Task.category))
    return [category for category in result.scalars().all() if category]


async def list_skills(db: AsyncSession) -> List[str]:
    """Distinct skills across all tasks, sorted."""
    result = await db.execute(select(Task.required_skills))
    skills = set()
    for required in result.scalars().all():
        skills.update(skill for skill in (required or []) if skill)
    return sorted(skills)
