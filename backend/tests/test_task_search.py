"""Tests for task discovery filters."""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.schemas.task import TaskFilters
from taskmarket.services import task_service
from taskmarket.services.task_search import build_task_filters, list_categories, list_skills, search_tasks

from conftest import new_task


@pytest.fixture
async def catalog(db: AsyncSession, company, other_company, admin):
    """Three open tasks and one still waiting for approval."""
    specs = [
        (company, dict(title="Translate menu", description="French to English",
                       required_skills=["french", "english"], category="Translation",
                       payment_amount=Decimal("40"), duration=1)),
        (company, dict(title="Python scraper", description="Scrape 3 sites into CSV",
                       required_skills=["python"], category="Development",
                       payment_amount=Decimal("150"), duration=3)),
        (other_company, dict(title="Logo feedback", description="Review five logo drafts",
                             required_skills=["design", "english"], category="Design",
                             payment_amount=Decimal("25"), duration=1)),
    ]
    tasks = {}
    for owner, fields in specs:
        task = await task_service.create_task(db, owner, new_task(**fields))
        tasks[task.title] = await task_service.approve_task(db, task.id, admin)

    draft = await task_service.create_task(
        db, company, new_task(title="Unpublished", required_skills=["python"])
    )
    tasks[draft.title] = draft
    return tasks


async def titles(db, **filters) -> set:
    items, _ = await search_tasks(db, TaskFilters(**filters))
    return {task.title for task in items}


def test_no_filters_still_filters_open_status():
    assert len(build_task_filters(TaskFilters())) == 1
    assert build_task_filters(TaskFilters(status=None)) == []


@pytest.mark.asyncio
async def test_default_shows_only_open_tasks(db: AsyncSession, catalog):
    items, total = await search_tasks(db, TaskFilters())

    assert total == 3
    assert "Unpublished" not in {task.title for task in items}


@pytest.mark.asyncio
async def test_skill_filter_matches_any(db: AsyncSession, catalog):
    assert await titles(db, skills=["python"]) == {"Python scraper"}
    assert await titles(db, skills=["french", "design"]) == {"Translate menu", "Logo feedback"}
    assert await titles(db, skills=["cobol"]) == set()


@pytest.mark.asyncio
async def test_skill_filter_matches_whole_skill(db: AsyncSession, catalog):
    assert await titles(db, skills=["eng"]) == set()


@pytest.mark.asyncio
async def test_payment_range_is_inclusive(db: AsyncSession, catalog):
    assert await titles(db, min_payment=Decimal("40"), max_payment=Decimal("150")) == {
        "Translate menu", "Python scraper"
    }
    assert await titles(db, max_payment=Decimal("25")) == {"Logo feedback"}


@pytest.mark.asyncio
async def test_category_duration_and_company(db: AsyncSession, catalog, other_company):
    assert await titles(db, category="Design") == {"Logo feedback"}
    assert await titles(db, duration=1) == {"Translate menu", "Logo feedback"}
    assert await titles(db, company_id=other_company.id) == {"Logo feedback"}


@pytest.mark.asyncio
async def test_search_title_or_description_case_insensitive(db: AsyncSession, catalog):
    assert await titles(db, search="SCRAPER") == {"Python scraper"}
    assert await titles(db, search="french") == {"Translate menu"}
    assert await titles(db, search="logo drafts") == {"Logo feedback"}


@pytest.mark.asyncio
async def test_pagination_reports_total(db: AsyncSession, catalog):
    items, total = await search_tasks(db, TaskFilters(), limit=2, offset=0)
    rest, _ = await search_tasks(db, TaskFilters(), limit=2, offset=2)

    assert total == 3
    assert len(items) == 2
    assert len(rest) == 1


@pytest.mark.asyncio
async def test_categories_and_skills_lists(db: AsyncSession, catalog):
    assert await list_categories(db) == ["Design", "Development", "Translation", "Writing"]
    assert await list_skills(db) == ["design", "english", "french", "python"]


@pytest.mark.asyncio
async def test_search_is_one_substring_not_separate_words(db: AsyncSession, company, admin):
    task = await task_service.create_task(
        db, company, new_task(title="bar and then foo", description="Nothing else")
    )
    await task_service.approve_task(db, task.id, admin)

    assert await titles(db, search="foo bar") == set()
    assert await titles(db, search="  AND THEN ") == {"bar and then foo"}


@pytest.mark.asyncio
async def test_search_wildcards_are_literal(db: AsyncSession, company, admin):
    for title in ["Grow sales 100%", "Grow sales 1000"]:
        task = await task_service.create_task(db, company, new_task(title=title))
        await task_service.approve_task(db, task.id, admin)

    assert await titles(db, search="100%") == {"Grow sales 100%"}


@pytest.mark.asyncio
async def test_skill_filter_is_literal_and_normalised(db: AsyncSession, company, admin):
    catalog = {
        "Underscore": ["a_b"],
        "Lookalike": ["axb"],
        "Accented": ["café"],
        "Shouting": ["Python"],
    }
    for title, skills in catalog.items():
        task = await task_service.create_task(
            db, company, new_task(title=title, required_skills=skills)
        )
        await task_service.approve_task(db, task.id, admin)

    assert await titles(db, skills=["a_b"]) == {"Underscore"}
    assert await titles(db, skills=["a%"]) == set()
    assert await titles(db, skills=["café"]) == {"Accented"}
    assert await titles(db, skills=["python"]) == {"Shouting"}
