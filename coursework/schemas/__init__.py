from .base import ErrorResponse, PageResponse
from .activity_submission import (
    SubmitActivityRequest,
    ReviewActivitySubmissionRequest,
    UpdateActivitySubmissionNotesRequest,
    ActivitySubmissionResponse,
    QuestionStatusResponse,
    SubmissionAttachmentResponse
)
from .question_submission import SubmitAnswerRequest, QuestionSubmissionResponse
from .user import LoginRequest, UserResponse, CurrentUserResponse
