"""
Fixtures for task tests.

Courses, chapters and tasks are real ORM objects built in memory; the
repositories are patched per test.
"""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from smartlearn.modules.courses.models import Chapter, Course
from smartlearn.modules.tasks.models import Task
from smartlearn.modules.tasks.schemas import TaskCreateRequest, TaskUpdateRequest
from smartlearn.modules.users.models import User, UserRole

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ID = "22222222-2222-2222-2222-222222222222"
COURSE_ID = "c0000000-0000-0000-0000-000000000001"
OTHER_COURSE_ID = "c0000000-0000-0000-0000-000000000002"
CHAPTER_ID = "d0000000-0000-0000-0000-000000000001"
FOREIGN_CHAPTER_ID = "d0000000-0000-0000-0000-000000000002"
TASK_ID = "e0000000-0000-0000-0000-000000000001"


def _stamp(entity, entity_id: str):
    now = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
    entity.id = entity_id
    entity.created_at = now
    entity.updated_at = now
    return entity


@pytest.fixture
def owner():
    user = MagicMock(spec=User)
    user.id = OWNER_ID
    user.username = "acme"
    user.role = UserRole.INSTITUTION
    return user


@pytest.fixture
def course():
    return _stamp(Course(title="Algebra", creator_id=OWNER_ID), COURSE_ID)


@pytest.fixture
def chapter():
    return _stamp(Chapter(title="Linear equations", course_id=COURSE_ID), CHAPTER_ID)


@pytest.fixture
def foreign_chapter():
    return _stamp(Chapter(title="Elsewhere", course_id=OTHER_COURSE_ID), FOREIGN_CHAPTER_ID)


@pytest.fixture
def task():
    return _stamp(
        Task(
            title="Homework 1",
            description="First set",
            content="Solve 1-10",
            course_id=COURSE_ID,
            chapter_id=CHAPTER_ID,
            creator_id=OWNER_ID,
            max_score=100,
            published=False,
        ),
        TASK_ID,
    )


@pytest.fixture
def create_request():
    return TaskCreateRequest(
        title="Homework 1",
        description="First set",
        content="Solve 1-10",
        course_id=COURSE_ID,
        chapter_id=CHAPTER_ID,
    )


@pytest.fixture
def update_request():
    return TaskUpdateRequest(
        title="Homework 1 (revised)",
        description="First set",
        content="Solve 1-12",
        chapter_id=CHAPTER_ID,
        max_score=50,
        published=True,
    )


@pytest.fixture
def repos():
    """Patch the task, course and user repositories used by the task service."""
    with (
        patch("smartlearn.modules.tasks.service.repository") as task_repo,
        patch("smartlearn.modules.tasks.service.course_repository") as course_repo,
        patch("smartlearn.modules.tasks.service.user_repository") as user_repo,
    ):
        course_repo.get_titles = AsyncMock(
            return_value=({COURSE_ID: "Algebra"}, {CHAPTER_ID: "Linear equations"})
        )
        user_repo.get_usernames = AsyncMock(return_value={OWNER_ID: "acme"})
        task_repo.save = AsyncMock(side_effect=lambda db, t: t)
        yield SimpleNamespace(task=task_repo, course=course_repo, user=user_repo)


@pytest.fixture
def ids():
    return SimpleNamespace(
        owner=OWNER_ID,
        other=OTHER_ID,
        course=COURSE_ID,
        chapter=CHAPTER_ID,
        foreign_chapter=FOREIGN_CHAPTER_ID,
        task=TASK_ID,
    )
