from .user import User, UserRole
from .group import Group, GroupMember, MemberRole
from .activity import Activity, ActivityItem
from .question import Question, QuestionOption, QuestionType
from .submission import (
    ActivitySubmission,
    ActivitySubmissionStatus,
    ActivitySubmissionAttachment,
    StoredFile
)
from .question_submission import QuestionSubmission

__all__ = [
    "User",
    "UserRole",
    "Group",
    "GroupMember",
    "MemberRole",
    "Activity",
    "ActivityItem",
    "Question",
    "QuestionOption",
    "QuestionType",
    "ActivitySubmission",
    "ActivitySubmissionStatus",
    "ActivitySubmissionAttachment",
    "StoredFile",
    "QuestionSubmission"
]
