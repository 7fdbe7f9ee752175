"""
Submission Repository

Database operations for task submissions.
"""

import logging
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import TaskSubmission

logger = logging.getLogger(__name__)


async def create(db: AsyncSession, submission: TaskSubmission) -> TaskSubmission:
    db.add(submission)
    await db.commit()
    await db.refresh(submission)
    logger.info(f"Created submission {submission.id} for task {submission.task_id}")
    return submission


async def save(db: AsyncSession, submission: TaskSubmission) -> TaskSubmission:
    """Persist changes made to a loaded submission."""
    await db.commit()
    await db.refresh(submission)
    return submission


async def get_by_id(db: AsyncSession, submission_id: str | UUID) -> TaskSubmission | None:
    return await db.get(TaskSubmission, str(submission_id))


async def get_by_task_and_user(
    db: AsyncSession,
    task_id: str | UUID,
    user_id: str | UUID,
) -> TaskSubmission | None:
    """Get the single submission of a student for a task, if any."""
    result = await db.execute(
        select(TaskSubmission).where(
            TaskSubmission.task_id == str(task_id),
            TaskSubmission.user_id == str(user_id),
        )
    )
    return result.scalar_one_or_none()


async def _page(
    db: AsyncSession,
    query,
    skip: int,
    limit: int,
) -> tuple[list[TaskSubmission], int]:
    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    result = await db.execute(
        query.order_by(desc(TaskSubmission.submitted_at)).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def list_for_task(
    db: AsyncSession,
    task_id: str | UUID,
    *,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[TaskSubmission], int]:
    """Submissions to a task, most recently submitted first."""
    query = select(TaskSubmission).where(TaskSubmission.task_id == str(task_id))
    return await _page(db, query, skip, limit)


async def list_for_user(
    db: AsyncSession,
    user_id: str | UUID,
    *,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[TaskSubmission], int]:
    """A student's submissions, most recently submitted first."""
    query = select(TaskSubmission).where(TaskSubmission.user_id == str(user_id))
    return await _page(db, query, skip, limit)
