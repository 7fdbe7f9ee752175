"""
Submission Schemas
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from .models import SubmissionStatus

MAX_ATTACHMENTS = 20
MAX_ATTACHMENT_URL_LENGTH = 2048

AttachmentUrl = Annotated[str, Field(min_length=1, max_length=MAX_ATTACHMENT_URL_LENGTH)]


class SubmitRequest(BaseModel):
    content: str | None = None
    attachments: list[AttachmentUrl] = Field(default_factory=list, max_length=MAX_ATTACHMENTS)


class GradeRequest(BaseModel):
    score: int = Field(..., ge=0)
    feedback: str | None = None


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    task_title: str | None = None
    user_id: str
    username: str | None = None
    content: str | None = None
    attachments: list[str] = Field(default_factory=list)
    score: int | None = None
    feedback: str | None = None
    status: SubmissionStatus
    submitted_at: datetime | None = None
    graded_at: datetime | None = None
    created_at: datetime
