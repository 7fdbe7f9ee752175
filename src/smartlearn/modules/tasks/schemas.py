"""
Task Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .models import DEFAULT_MAX_SCORE


class TaskFields(BaseModel):
    """Fields a creator sets on create and overwrites on update."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    content: str | None = None
    chapter_id: UUID | None = None
    deadline: datetime | None = None
    max_score: int = Field(DEFAULT_MAX_SCORE, ge=0)
    published: bool = False


class TaskCreateRequest(TaskFields):
    course_id: UUID


class TaskUpdateRequest(TaskFields):
    """
    Full overwrite of a task's mutable fields.

    The course cannot change. Omitting ``chapter_id`` detaches the chapter.
    """


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    content: str | None = None
    course_id: str
    course_title: str | None = None
    chapter_id: str | None = None
    chapter_title: str | None = None
    creator_id: str
    creator_name: str | None = None
    deadline: datetime | None = None
    max_score: int
    published: bool
    created_at: datetime
    updated_at: datetime
