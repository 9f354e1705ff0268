from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SubmitActivityRequest(BaseModel):
    notes: Optional[str] = None


class ReviewActivitySubmissionRequest(BaseModel):
    status: str
    feedback_notes: Optional[str] = None


class UpdateActivitySubmissionNotesRequest(BaseModel):
    notes: Optional[str] = None


class ActivityRef(BaseModel):
    id: str
    title: str


class UserRef(BaseModel):
    id: str
    name: str
    avatar_url: Optional[str] = None


class ActivitySubmissionResponse(BaseModel):
    id: str
    activity: ActivityRef
    user: UserRef
    status: str
    notes: Optional[str] = None
    feedback_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UserRef] = None
    submitted_at: datetime

    @classmethod
    def from_model(cls, submission) -> "ActivitySubmissionResponse":
        reviewed_by = None
        if submission.reviewer is not None:
            reviewed_by = UserRef(id=submission.reviewer.public_id, name=submission.reviewer.name)
        return cls(
            id=submission.public_id,
            activity=ActivityRef(id=submission.activity.public_id, title=submission.activity.title),
            user=UserRef(
                id=submission.user.public_id,
                name=submission.user.name,
                avatar_url=submission.user.avatar_url
            ),
            status=getattr(submission.status, "value", submission.status),
            notes=submission.notes,
            feedback_notes=submission.feedback_notes,
            reviewed_at=submission.reviewed_at,
            reviewed_by=reviewed_by,
            submitted_at=submission.submitted_at
        )


class QuestionStatusResponse(BaseModel):
    question_id: str
    passed: bool
    attempts: int
    last_score: Optional[int] = None

    class Config:
        from_attributes = True


class SubmissionAttachmentResponse(BaseModel):
    id: str
    filename: str
    content_type: str
    size_bytes: int
    url: str

    @classmethod
    def from_attachment(cls, attachment) -> "SubmissionAttachmentResponse":
        return cls(
            id=attachment.public_id,
            filename=attachment.filename,
            content_type=attachment.content_type,
            size_bytes=attachment.size_bytes,
            url=attachment.url
        )
