"""
Task Repository

Database operations for tasks.
"""

import logging
from uuid import UUID

from sqlalchemy import ColumnElement, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Task

logger = logging.getLogger(__name__)


async def create(db: AsyncSession, task: Task) -> Task:
    """Insert a new task."""
    db.add(task)
    await db.commit()
    await db.refresh(task)
    logger.info(f"Created task: {task.id} - {task.title}")
    return task


async def save(db: AsyncSession, task: Task) -> Task:
    """Persist changes made to a loaded task."""
    await db.commit()
    await db.refresh(task)
    return task


async def get_by_id(db: AsyncSession, task_id: str | UUID) -> Task | None:
    return await db.get(Task, str(task_id))


async def delete_by_id(db: AsyncSession, task_id: str | UUID) -> None:
    await db.execute(delete(Task).where(Task.id == str(task_id)))
    await db.commit()


def owner_list_predicates(
    creator_id: str,
    course_id: str | None,
    published: bool | None,
) -> list[ColumnElement[bool]]:
    """
    Predicates for a creator's task listing.

    One of four shapes, depending on which optional filters are given:
    course and published, published only, course only, or neither.
    """
    if course_id is not None and published is not None:
        return [
            Task.creator_id == creator_id,
            Task.course_id == course_id,
            Task.published == published,
        ]
    if published is not None:
        return [Task.creator_id == creator_id, Task.published == published]
    if course_id is not None:
        return [Task.creator_id == creator_id, Task.course_id == course_id]
    return [Task.creator_id == creator_id]


async def list_for_creator(
    db: AsyncSession,
    creator_id: str,
    *,
    course_id: str | None = None,
    published: bool | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[Task], int]:
    """
    List a creator's tasks, newest first.

    Returns:
        Tuple of (tasks on this page, total matching tasks)
    """
    query = select(Task).where(*owner_list_predicates(creator_id, course_id, published))

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    result = await db.execute(query.order_by(desc(Task.created_at)).offset(skip).limit(limit))
    return list(result.scalars().all()), total


async def list_published_for_course(db: AsyncSession, course_id: str | UUID) -> list[Task]:
    """All published tasks of a course, newest first."""
    result = await db.execute(
        select(Task)
        .where(Task.course_id == str(course_id), Task.published.is_(True))
        .order_by(desc(Task.created_at))
    )
    return list(result.scalars().all())


async def get_titles(db: AsyncSession, task_ids: set[str]) -> dict[str, str]:
    """Batch-load task titles keyed by task ID."""
    if not task_ids:
        return {}
    result = await db.execute(select(Task.id, Task.title).where(Task.id.in_(task_ids)))
    return {str(row.id): row.title for row in result}
