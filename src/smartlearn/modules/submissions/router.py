"""
Submission Routers

Mounted under /tasks:
- POST /tasks/{id}/submissions - Submit or resubmit work (STUDENT)
- GET /tasks/{id}/submissions - Submissions to own task (INSTITUTION)

Mounted under /submissions:
- PUT /submissions/{id}/grade - Grade a submission to own task (INSTITUTION)
- GET /submissions/my - Caller's own submissions (STUDENT)
- GET /submissions/{id} - Submission detail
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.auth import CurrentUser, get_current_user, require_roles
from smartlearn.core.database import get_db
from smartlearn.core.exceptions import ServiceError
from smartlearn.modules.shared import PageResponse
from smartlearn.modules.shared.http import raise_internal_error, raise_service_error
from smartlearn.modules.users.models import UserRole

from . import service
from .schemas import GradeRequest, SubmissionResponse, SubmitRequest

logger = logging.getLogger(__name__)

task_submissions_router = APIRouter()
router = APIRouter()

_student_only = require_roles(UserRole.STUDENT)
_institution_only = require_roles(UserRole.INSTITUTION)


@task_submissions_router.post(
    "/{task_id}/submissions",
    response_model=SubmissionResponse,
    summary="Submit Task",
    description="Create or replace the caller's submission. Resets status to SUBMITTED.",
)
async def submit_task(
    task_id: UUID,
    data: SubmitRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_student_only),
) -> SubmissionResponse:
    try:
        return await service.submit(db, str(task_id), data, user.id)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "submitting task")


@task_submissions_router.get(
    "/{task_id}/submissions",
    response_model=PageResponse[SubmissionResponse],
    summary="List Task Submissions",
)
async def list_task_submissions(
    task_id: UUID,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    size: int = Query(10, ge=1, le=100, description="Page size"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_institution_only),
) -> PageResponse[SubmissionResponse]:
    try:
        return await service.list_for_task(db, str(task_id), user.id, page=page, size=size)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "listing task submissions")


@router.put("/{submission_id}/grade", response_model=SubmissionResponse, summary="Grade")
async def grade_submission(
    submission_id: UUID,
    data: GradeRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_institution_only),
) -> SubmissionResponse:
    try:
        return await service.grade(db, str(submission_id), data, user.id)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "grading submission")


@router.get("/my", response_model=PageResponse[SubmissionResponse], summary="My Submissions")
async def list_my_submissions(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    size: int = Query(10, ge=1, le=100, description="Page size"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_student_only),
) -> PageResponse[SubmissionResponse]:
    try:
        return await service.list_for_student(db, user.id, page=page, size=size)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "listing submissions")


@router.get("/{submission_id}", response_model=SubmissionResponse, summary="Get Submission")
async def get_submission(
    submission_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> SubmissionResponse:
    caller_id = None if user.role == UserRole.ADMIN else user.id
    try:
        return await service.get_submission(db, str(submission_id), caller_id)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "getting submission")
