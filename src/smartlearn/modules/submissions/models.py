"""
Submission Models
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column

from smartlearn.modules.shared import BaseModel


class SubmissionStatus(str, Enum):
    """Grading state of a submission."""

    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"


class TaskSubmission(BaseModel):
    """
    A student's work on one task.

    There is at most one row per (task, student); resubmitting updates it.
    Attachment URLs are stored as a text array, in submission order.
    """

    __tablename__ = "task_submissions"
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_task_submissions_task_user"),)

    task_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachments: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        default=list,
        server_default="{}",
        nullable=False,
    )

    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[SubmissionStatus] = mapped_column(
        ENUM(SubmissionStatus, name="submission_status", create_type=True),
        default=SubmissionStatus.SUBMITTED,
        nullable=False,
    )

    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    graded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<TaskSubmission(id={self.id}, task_id={self.task_id}, "
            f"user_id={self.user_id}, status={self.status.value})>"
        )
