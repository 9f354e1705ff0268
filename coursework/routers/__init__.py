from .activity_submissions import router as activity_submission_router
from .question_submissions import router as question_submission_router
from .auth import router as auth_router

__all__ = [
    'activity_submission_router',
    'question_submission_router',
    'auth_router'
]
