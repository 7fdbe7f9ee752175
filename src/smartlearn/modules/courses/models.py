"""
Course Models

Courses are owned by an institution account; chapters belong to exactly
one course. Course content management lives outside this service, which
only reads these rows to authorize task operations.
"""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from smartlearn.modules.shared import BaseModel


class Course(BaseModel):
    """A course published by an institution."""

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title})>"


class Chapter(BaseModel):
    """An ordered section of a course."""

    __tablename__ = "chapters"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Chapter(id={self.id}, course_id={self.course_id}, title={self.title})>"
