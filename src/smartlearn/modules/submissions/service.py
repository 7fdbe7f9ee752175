"""
Submission Service Layer

Students submit work to published tasks; the task's creator grades it.

Status moves SUBMITTED -> GRADED on grading. Resubmitting (there is one
submission per task and student) always moves it back to SUBMITTED while
leaving any previous score, feedback and grading time in place.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from smartlearn.modules.shared import PageResponse, is_owner, page_offset
from smartlearn.modules.tasks import repository as task_repository
from smartlearn.modules.tasks.service import NotTaskOwnerError, TaskNotFoundError
from smartlearn.modules.users import repository as user_repository

from . import repository
from .models import SubmissionStatus, TaskSubmission
from .schemas import GradeRequest, SubmissionResponse, SubmitRequest

logger = logging.getLogger(__name__)


class TaskNotPublishedError(ConflictError):
    def __init__(self):
        super().__init__(
            message="This task is not open for submissions.",
            error_code="TASK_NOT_PUBLISHED",
        )


class StudentNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="Student not found", error_code="STUDENT_NOT_FOUND")


class NotSubmissionViewerError(PermissionDeniedError):
    def __init__(self):
        super().__init__(
            message="You do not have permission to view this submission.",
            error_code="NOT_SUBMISSION_VIEWER",
        )


class SubmissionNotFoundError(NotFoundError):
    def __init__(self, submission_id: str | UUID | None = None):
        message = (
            f"Submission {submission_id} not found" if submission_id else "Submission not found"
        )
        super().__init__(message=message, error_code="SUBMISSION_NOT_FOUND")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def mark_submitted(
    submission: TaskSubmission,
    content: str | None,
    attachments: list[str],
    now: datetime,
) -> None:
    """Record new work. Any earlier grade is kept but the status resets."""
    submission.content = content
    submission.attachments = list(attachments)
    submission.status = SubmissionStatus.SUBMITTED
    submission.submitted_at = now


def mark_graded(
    submission: TaskSubmission,
    score: int,
    feedback: str | None,
    now: datetime,
) -> None:
    submission.score = score
    submission.feedback = feedback
    submission.status = SubmissionStatus.GRADED
    submission.graded_at = now


async def to_responses(
    db: AsyncSession,
    submissions: Sequence[TaskSubmission],
) -> list[SubmissionResponse]:
    """Build responses with task titles and student usernames filled in."""
    if not submissions:
        return []

    task_titles = await task_repository.get_titles(db, {str(s.task_id) for s in submissions})
    usernames = await user_repository.get_usernames(db, {str(s.user_id) for s in submissions})

    responses = []
    for submission in submissions:
        response = SubmissionResponse.model_validate(submission)
        response.task_title = task_titles.get(str(submission.task_id))
        response.username = usernames.get(str(submission.user_id))
        responses.append(response)
    return responses


async def _to_response(db: AsyncSession, submission: TaskSubmission) -> SubmissionResponse:
    return (await to_responses(db, [submission]))[0]


async def submit(
    db: AsyncSession,
    task_id: str | UUID,
    data: SubmitRequest,
    student_id: str,
    clock: Callable[[], datetime] = _utcnow,
) -> SubmissionResponse:
    """
    Create or replace the caller's submission for a task.

    Args:
        db: Database session
        task_id: Task being submitted to
        data: Content and attachment URLs
        student_id: Account ID of the submitting student
        clock: Source of the submission time

    Returns:
        The stored submission, with status SUBMITTED

    Raises:
        TaskNotFoundError: Task does not exist
        TaskNotPublishedError: Task is not published
        StudentNotFoundError: Student account does not exist
    """
    task = await task_repository.get_by_id(db, task_id)
    if not task:
        raise TaskNotFoundError(task_id)

    if not task.published:
        raise TaskNotPublishedError()

    student = await user_repository.get_by_id(db, student_id)
    if not student:
        raise StudentNotFoundError()

    now = clock()
    submission = await repository.get_by_task_and_user(db, task.id, student.id)

    if submission is None:
        submission = TaskSubmission(task_id=task.id, user_id=student.id)
        mark_submitted(submission, data.content, data.attachments, now)
        try:
            submission = await repository.create(db, submission)
        except IntegrityError:
            # A concurrent first submission won the insert; update that row instead
            await db.rollback()
            submission = await repository.get_by_task_and_user(db, task.id, student.id)
            if submission is None:
                raise
            logger.info(f"Submission for task {task.id} already created, updating it")
        else:
            return await _to_response(db, submission)

    mark_submitted(submission, data.content, data.attachments, now)
    submission = await repository.save(db, submission)
    logger.info(f"Resubmitted submission {submission.id} for task {task.id}")

    return await _to_response(db, submission)


async def grade(
    db: AsyncSession,
    submission_id: str | UUID,
    data: GradeRequest,
    caller_id: str,
    clock: Callable[[], datetime] = _utcnow,
) -> SubmissionResponse:
    """
    Grade a submission. Only the creator of its task may do this.

    Raises:
        SubmissionNotFoundError: Submission does not exist
        TaskNotFoundError: The submission's task no longer exists
        NotTaskOwnerError: Caller did not create the task
    """
    submission = await repository.get_by_id(db, submission_id)
    if not submission:
        raise SubmissionNotFoundError(submission_id)

    task = await task_repository.get_by_id(db, submission.task_id)
    if not task:
        raise TaskNotFoundError(submission.task_id)

    if not is_owner(task.creator_id, caller_id):
        logger.warning(f"User {caller_id} tried to grade submission {submission.id}")
        raise NotTaskOwnerError()

    mark_graded(submission, data.score, data.feedback, clock())
    submission = await repository.save(db, submission)

    logger.info(f"Graded submission {submission.id}: score={submission.score}")
    return await _to_response(db, submission)


async def list_for_task(
    db: AsyncSession,
    task_id: str | UUID,
    caller_id: str,
    *,
    page: int = 1,
    size: int = 10,
) -> PageResponse[SubmissionResponse]:
    """List a task's submissions. Only the task's creator may do this."""
    task = await task_repository.get_by_id(db, task_id)
    if not task:
        raise TaskNotFoundError(task_id)

    if not is_owner(task.creator_id, caller_id):
        logger.warning(f"User {caller_id} tried to list submissions of task {task.id}")
        raise NotTaskOwnerError()

    submissions, total = await repository.list_for_task(
        db,
        task.id,
        skip=page_offset(page, size),
        limit=size,
    )
    return PageResponse[SubmissionResponse].build(
        records=await to_responses(db, submissions),
        total=total,
        page=page,
        size=size,
    )


async def list_for_student(
    db: AsyncSession,
    student_id: str,
    *,
    page: int = 1,
    size: int = 10,
) -> PageResponse[SubmissionResponse]:
    submissions, total = await repository.list_for_user(
        db,
        student_id,
        skip=page_offset(page, size),
        limit=size,
    )
    return PageResponse[SubmissionResponse].build(
        records=await to_responses(db, submissions),
        total=total,
        page=page,
        size=size,
    )


async def get_submission(
    db: AsyncSession,
    submission_id: str | UUID,
    caller_id: str | None = None,
) -> SubmissionResponse:
    """
    Get one submission.

    When ``caller_id`` is given it must be the submitting student or the
    creator of the task. Pass None to skip the check (administrators).

    Raises:
        SubmissionNotFoundError, NotSubmissionViewerError
    """
    submission = await repository.get_by_id(db, submission_id)
    if not submission:
        raise SubmissionNotFoundError(submission_id)

    if caller_id is not None and not is_owner(submission.user_id, caller_id):
        task = await task_repository.get_by_id(db, submission.task_id)
        if task is None or not is_owner(task.creator_id, caller_id):
            logger.warning(f"User {caller_id} denied access to submission {submission.id}")
            raise NotSubmissionViewerError()

    return await _to_response(db, submission)
