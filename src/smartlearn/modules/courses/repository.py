"""
Course Repository

Read-only lookups for courses and chapters.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.modules.courses.models import Chapter, Course


async def get_course(db: AsyncSession, course_id: str | UUID) -> Course | None:
    """Get a course by ID."""
    return await db.get(Course, str(course_id))


async def get_chapter(db: AsyncSession, chapter_id: str | UUID) -> Chapter | None:
    """Get a chapter by ID."""
    return await db.get(Chapter, str(chapter_id))


async def get_titles(
    db: AsyncSession,
    course_ids: set[str],
    chapter_ids: set[str],
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Batch-load titles for response enrichment.

    Returns:
        Tuple of (course_id -> title, chapter_id -> title)
    """
    course_titles: dict[str, str] = {}
    chapter_titles: dict[str, str] = {}

    if course_ids:
        result = await db.execute(
            select(Course.id, Course.title).where(Course.id.in_(course_ids))
        )
        course_titles = {str(row.id): row.title for row in result}

    if chapter_ids:
        result = await db.execute(
            select(Chapter.id, Chapter.title).where(Chapter.id.in_(chapter_ids))
        )
        chapter_titles = {str(row.id): row.title for row in result}

    return course_titles, chapter_titles
