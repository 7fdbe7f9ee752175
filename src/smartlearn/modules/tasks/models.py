"""
Task Models

A task (assignment) belongs to a course and optionally to one of that
course's chapters. Only its creator may change, delete or grade it.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from smartlearn.modules.shared import BaseModel

DEFAULT_MAX_SCORE = 100


class Task(BaseModel):
    """
    Assignment published to a course.

    ``chapter_id``, when set, references a chapter of ``course_id``.
    ``creator_id`` never changes after creation.
    """

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    chapter_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("chapters.id", ondelete="SET NULL"),
        nullable=True,
    )
    creator_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_score: Mapped[int] = mapped_column(Integer, default=DEFAULT_MAX_SCORE, nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title}, published={self.published})>"
