"""
Submissions module - Student work on tasks and its grading.
"""

from smartlearn.modules.submissions.models import SubmissionStatus, TaskSubmission

__all__ = ["SubmissionStatus", "TaskSubmission"]
