"""
Task Router

Endpoints:
- POST /tasks - Create task (INSTITUTION)
- PUT /tasks/{id} - Update own task (INSTITUTION)
- DELETE /tasks/{id} - Delete own task (INSTITUTION)
- GET /tasks/my - List own tasks (INSTITUTION)
- GET /tasks/course/{course_id} - Published tasks of a course
- GET /tasks/{id} - Task detail
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartlearn.core.auth import CurrentUser, get_current_user, require_roles
from smartlearn.core.database import get_db
from smartlearn.core.exceptions import ServiceError
from smartlearn.modules.shared import MessageResponse, PageResponse
from smartlearn.modules.shared.http import raise_internal_error, raise_service_error
from smartlearn.modules.users.models import UserRole

from . import service
from .schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()

_institution_only = require_roles(UserRole.INSTITUTION)


@router.post("", response_model=TaskResponse, status_code=201, summary="Create Task")
async def create_task(
    data: TaskCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_institution_only),
) -> TaskResponse:
    try:
        return await service.create_task(db, data, user.id)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "creating task")


@router.put("/{task_id}", response_model=TaskResponse, summary="Update Task")
async def update_task(
    task_id: UUID,
    data: TaskUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_institution_only),
) -> TaskResponse:
    try:
        return await service.update_task(db, str(task_id), data, user.id)
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "updating task")


@router.delete("/{task_id}", response_model=MessageResponse, summary="Delete Task")
async def delete_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_institution_only),
) -> MessageResponse:
    try:
        await service.delete_task(db, str(task_id), user.id)
        return MessageResponse(message="Task deleted.")
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "deleting task")


@router.get(
    "/my",
    response_model=PageResponse[TaskResponse],
    summary="List My Tasks",
    description="Tasks created by the caller, newest first, optionally filtered.",
)
async def list_my_tasks(
    course_id: UUID | None = Query(None, description="Only tasks of this course"),
    published: bool | None = Query(None, description="Only published / unpublished tasks"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    size: int = Query(10, ge=1, le=100, description="Page size"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(_institution_only),
) -> PageResponse[TaskResponse]:
    try:
        return await service.list_for_owner(
            db,
            user.id,
            course_id=str(course_id) if course_id else None,
            published=published,
            page=page,
            size=size,
        )
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "listing tasks")


@router.get(
    "/course/{course_id}",
    response_model=list[TaskResponse],
    summary="List Course Tasks",
)
async def list_course_tasks(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> list[TaskResponse]:
    try:
        return await service.list_published_for_course(db, str(course_id))
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "listing course tasks")


@router.get("/{task_id}", response_model=TaskResponse, summary="Get Task")
async def get_task(
    task_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> TaskResponse:
    try:
        return await service.get_task(db, str(task_id))
    except ServiceError as e:
        raise_service_error(e)
    except Exception as e:
        raise_internal_error(e, "getting task")
