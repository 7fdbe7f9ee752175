from fastapi import APIRouter

from smartlearn.modules.auth.router import router as auth_router
from smartlearn.modules.submissions.router import router as submissions_router
from smartlearn.modules.submissions.router import task_submissions_router
from smartlearn.modules.tasks.router import router as tasks_router
from smartlearn.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(users_router, prefix="/users", tags=["Admin - Users"])

api_router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])

api_router.include_router(task_submissions_router, prefix="/tasks", tags=["Submissions"])

api_router.include_router(submissions_router, prefix="/submissions", tags=["Submissions"])
