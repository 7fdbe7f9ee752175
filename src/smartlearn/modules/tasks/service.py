"""
Task Service Layer

Creation, update, deletion and listing of tasks under ownership rules:

- Only the creator of a course may add tasks to it.
- A task's chapter must belong to the task's course.
- Only the creator of a task may update or delete it.

Reads (single task, published tasks of a course) carry no ownership check.
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.exceptions import NotFoundError, PermissionDeniedError, RequestValidationError
from smartlearn.modules.courses import repository as course_repository
from smartlearn.modules.courses.models import Chapter, Course
from smartlearn.modules.shared import PageResponse, is_owner, page_offset
from smartlearn.modules.users import repository as user_repository
from smartlearn.modules.users.service import UserNotFoundError

from . import repository
from .models import Task
from .schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest

logger = logging.getLogger(__name__)


# ============================================
# Exceptions
# ============================================


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: str | UUID | None = None):
        message = f"Task {task_id} not found" if task_id else "Task not found"
        super().__init__(message=message, error_code="TASK_NOT_FOUND")


class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: str | UUID | None = None):
        message = f"Course {course_id} not found" if course_id else "Course not found"
        super().__init__(message=message, error_code="COURSE_NOT_FOUND")


class ChapterNotFoundError(NotFoundError):
    def __init__(self, chapter_id: str | UUID | None = None):
        message = f"Chapter {chapter_id} not found" if chapter_id else "Chapter not found"
        super().__init__(message=message, error_code="CHAPTER_NOT_FOUND")


class NotCourseOwnerError(PermissionDeniedError):
    def __init__(self):
        super().__init__(
            message="You can only add tasks to your own courses.",
            error_code="NOT_COURSE_OWNER",
        )


class NotTaskOwnerError(PermissionDeniedError):
    def __init__(self):
        super().__init__(
            message="You do not have permission to modify this task.",
            error_code="NOT_TASK_OWNER",
        )


class ChapterNotInCourseError(RequestValidationError):
    def __init__(self):
        super().__init__(
            message="The chapter does not belong to the task's course.",
            error_code="CHAPTER_NOT_IN_COURSE",
        )


# ============================================
# Helpers
# ============================================


async def _get_task_or_raise(db: AsyncSession, task_id: str | UUID) -> Task:
    task = await repository.get_by_id(db, task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    return task


async def _get_owned_task(db: AsyncSession, task_id: str | UUID, caller_id: str) -> Task:
    task = await _get_task_or_raise(db, task_id)
    if not is_owner(task.creator_id, caller_id):
        logger.warning(f"User {caller_id} denied access to task {task.id}")
        raise NotTaskOwnerError()
    return task


async def _resolve_chapter(
    db: AsyncSession, chapter_id: str | UUID, course: Course | str
) -> Chapter:
    """Load a chapter and check it belongs to ``course`` (a Course or its ID)."""
    chapter = await course_repository.get_chapter(db, chapter_id)
    if not chapter:
        raise ChapterNotFoundError(chapter_id)

    course_id = course.id if isinstance(course, Course) else course
    if str(chapter.course_id) != str(course_id):
        logger.warning(f"Chapter {chapter_id} is not part of course {course_id}")
        raise ChapterNotInCourseError()
    return chapter


async def to_responses(db: AsyncSession, tasks: Sequence[Task]) -> list[TaskResponse]:
    """Build responses with course, chapter and creator names filled in."""
    if not tasks:
        return []

    course_titles, chapter_titles = await course_repository.get_titles(
        db,
        {str(t.course_id) for t in tasks},
        {str(t.chapter_id) for t in tasks if t.chapter_id},
    )
    creator_names = await user_repository.get_usernames(db, {str(t.creator_id) for t in tasks})

    responses = []
    for task in tasks:
        response = TaskResponse.model_validate(task)
        response.course_title = course_titles.get(str(task.course_id))
        if task.chapter_id:
            response.chapter_title = chapter_titles.get(str(task.chapter_id))
        response.creator_name = creator_names.get(str(task.creator_id))
        responses.append(response)
    return responses


async def _to_response(db: AsyncSession, task: Task) -> TaskResponse:
    return (await to_responses(db, [task]))[0]


# ============================================
# Operations
# ============================================


async def create_task(
    db: AsyncSession,
    data: TaskCreateRequest,
    caller_id: str,
) -> TaskResponse:
    """
    Create a task in one of the caller's courses.

    Args:
        db: Database session
        data: Task fields, including the target course and optional chapter
        caller_id: Account ID of the requesting institution

    Returns:
        The created task

    Raises:
        UserNotFoundError: Caller account no longer exists
        CourseNotFoundError: Course does not exist
        NotCourseOwnerError: Caller did not create the course
        ChapterNotFoundError: Chapter does not exist
        ChapterNotInCourseError: Chapter belongs to another course
    """
    creator = await user_repository.get_by_id(db, caller_id)
    if not creator:
        raise UserNotFoundError(caller_id)

    course = await course_repository.get_course(db, data.course_id)
    if not course:
        raise CourseNotFoundError(data.course_id)

    if not is_owner(course.creator_id, caller_id):
        logger.warning(f"User {caller_id} tried to add a task to course {course.id}")
        raise NotCourseOwnerError()

    chapter_id = None
    if data.chapter_id is not None:
        chapter = await _resolve_chapter(db, data.chapter_id, course)
        chapter_id = chapter.id

    task = Task(
        title=data.title,
        description=data.description,
        content=data.content,
        course_id=course.id,
        chapter_id=chapter_id,
        creator_id=creator.id,
        deadline=data.deadline,
        max_score=data.max_score,
        published=data.published,
    )
    task = await repository.create(db, task)
    return await _to_response(db, task)


async def update_task(
    db: AsyncSession,
    task_id: str | UUID,
    data: TaskUpdateRequest,
    caller_id: str,
) -> TaskResponse:
    """
    Overwrite a task's mutable fields.

    A new chapter is validated against the task's course before anything
    changes, so a rejected update leaves the task as it was. A missing
    ``chapter_id`` detaches the current chapter.

    Raises:
        TaskNotFoundError, NotTaskOwnerError, ChapterNotFoundError,
        ChapterNotInCourseError
    """
    task = await _get_owned_task(db, task_id, caller_id)

    chapter_id = task.chapter_id
    if data.chapter_id is None:
        chapter_id = None
    elif str(data.chapter_id) != str(task.chapter_id):
        chapter = await _resolve_chapter(db, data.chapter_id, task.course_id)
        chapter_id = chapter.id

    task.title = data.title
    task.description = data.description
    task.content = data.content
    task.deadline = data.deadline
    task.max_score = data.max_score
    task.published = data.published
    task.chapter_id = chapter_id

    task = await repository.save(db, task)
    logger.info(f"Updated task {task.id}")
    return await _to_response(db, task)


async def delete_task(db: AsyncSession, task_id: str | UUID, caller_id: str) -> None:
    """Delete a task owned by the caller. Its submissions go with it."""
    task = await _get_owned_task(db, task_id, caller_id)
    await repository.delete_by_id(db, task.id)
    logger.info(f"Deleted task {task.id}")


async def get_task(db: AsyncSession, task_id: str | UUID) -> TaskResponse:
    task = await _get_task_or_raise(db, task_id)
    return await _to_response(db, task)


async def list_for_owner(
    db: AsyncSession,
    caller_id: str,
    *,
    course_id: str | None = None,
    published: bool | None = None,
    page: int = 1,
    size: int = 10,
) -> PageResponse[TaskResponse]:
    """List the caller's own tasks, optionally by course and/or published flag."""
    tasks, total = await repository.list_for_creator(
        db,
        caller_id,
        course_id=course_id,
        published=published,
        skip=page_offset(page, size),
        limit=size,
    )
    return PageResponse[TaskResponse].build(
        records=await to_responses(db, tasks),
        total=total,
        page=page,
        size=size,
    )


async def list_published_for_course(db: AsyncSession, course_id: str | UUID) -> list[TaskResponse]:
    tasks = await repository.list_published_for_course(db, course_id)
    return await to_responses(db, tasks)
