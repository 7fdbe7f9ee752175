"""
Fixtures for submission tests.

Submissions live in an in-memory repository so the full submit/grade/
resubmit lifecycle can be exercised without a database.
"""

import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from smartlearn.modules.tasks.models import Task
from smartlearn.modules.users.models import User, UserRole

INSTRUCTOR_ID = "11111111-1111-1111-1111-111111111111"
STUDENT_ID = "33333333-3333-3333-3333-333333333333"
OTHER_STUDENT_ID = "44444444-4444-4444-4444-444444444444"
TASK_ID = "e0000000-0000-0000-0000-000000000001"


class InMemorySubmissionRepository:
    """Async stand-in for the submission repository module."""

    def __init__(self):
        self.rows = {}
        self.saves = 0

    async def create(self, db, submission):
        submission.id = str(uuid.uuid4())
        submission.created_at = datetime.now(UTC)
        submission.updated_at = submission.created_at
        self.rows[submission.id] = submission
        return submission

    async def save(self, db, submission):
        self.saves += 1
        submission.updated_at = datetime.now(UTC)
        return submission

    async def get_by_id(self, db, submission_id):
        return self.rows.get(str(submission_id))

    async def get_by_task_and_user(self, db, task_id, user_id):
        for row in self.rows.values():
            if str(row.task_id) == str(task_id) and str(row.user_id) == str(user_id):
                return row
        return None

    async def list_for_task(self, db, task_id, *, skip=0, limit=10):
        rows = [r for r in self.rows.values() if str(r.task_id) == str(task_id)]
        return rows[skip : skip + limit], len(rows)

    async def list_for_user(self, db, user_id, *, skip=0, limit=10):
        rows = [r for r in self.rows.values() if str(r.user_id) == str(user_id)]
        return rows[skip : skip + limit], len(rows)


class SteppingClock:
    """Clock that moves forward one minute on every call."""

    def __init__(self):
        self.now = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


def _account(user_id, username, role):
    user = MagicMock(spec=User)
    user.id = user_id
    user.username = username
    user.role = role
    return user


@pytest.fixture
def ids():
    return SimpleNamespace(
        instructor=INSTRUCTOR_ID,
        student=STUDENT_ID,
        other_student=OTHER_STUDENT_ID,
        task=TASK_ID,
    )


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def published_task():
    task = Task(
        title="Essay",
        course_id="c0000000-0000-0000-0000-000000000001",
        creator_id=INSTRUCTOR_ID,
        max_score=100,
        published=True,
    )
    task.id = TASK_ID
    return task


@pytest.fixture
def accounts():
    return {
        INSTRUCTOR_ID: _account(INSTRUCTOR_ID, "instructor", UserRole.INSTITUTION),
        STUDENT_ID: _account(STUDENT_ID, "alice", UserRole.STUDENT),
        OTHER_STUDENT_ID: _account(OTHER_STUDENT_ID, "bob", UserRole.STUDENT),
    }


@pytest.fixture
def repos(published_task, accounts):
    """Patch the repositories used by the submission service."""
    store = InMemorySubmissionRepository()
    tasks = {published_task.id: published_task}

    with (
        patch("smartlearn.modules.submissions.service.repository", store),
        patch("smartlearn.modules.submissions.service.task_repository") as task_repo,
        patch("smartlearn.modules.submissions.service.user_repository") as user_repo,
    ):
        task_repo.get_by_id = AsyncMock(side_effect=lambda db, task_id: tasks.get(str(task_id)))
        task_repo.get_titles = AsyncMock(
            side_effect=lambda db, task_ids: {
                t: tasks[t].title for t in task_ids if t in tasks
            }
        )
        user_repo.get_by_id = AsyncMock(
            side_effect=lambda db, user_id: accounts.get(str(user_id))
        )
        user_repo.get_usernames = AsyncMock(
            side_effect=lambda db, user_ids: {
                u: accounts[u].username for u in user_ids if u in accounts
            }
        )
        yield SimpleNamespace(submissions=store, task=task_repo, user=user_repo, tasks=tasks)
