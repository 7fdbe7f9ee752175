"""
Courses module - Course and chapter lookups used for task ownership checks.
"""

from smartlearn.modules.courses.models import Chapter, Course

__all__ = ["Chapter", "Course"]
