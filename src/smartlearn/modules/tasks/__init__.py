"""
Tasks module - Course assignments owned by their creating institution.
"""

from smartlearn.modules.tasks.models import Task

__all__ = ["Task"]
