from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SubmitAnswerRequest(BaseModel):
    question_option_id: Optional[str] = None
    answer_text: Optional[str] = None
    # 활동 안에서 푼 경우 해당 활동의 공개 ID
    activity_id: Optional[str] = None


class QuestionRef(BaseModel):
    id: str
    type: str
    statement: str


class OptionRef(BaseModel):
    id: str
    text: Optional[str] = None
    is_correct: bool


class QuestionSubmissionResponse(BaseModel):
    id: str
    question: QuestionRef
    option_selected: Optional[OptionRef] = None
    answer_text: Optional[str] = None
    score: Optional[int] = None
    answer_feedback: Optional[str] = None
    passed: bool
    submitted_at: datetime

    @classmethod
    def from_model(cls, submission) -> "QuestionSubmissionResponse":
        option = None
        if submission.option is not None:
            option = OptionRef(
                id=submission.option.public_id,
                text=submission.option.text,
                is_correct=submission.option.is_correct
            )
        question = submission.question
        return cls(
            id=submission.public_id,
            question=QuestionRef(
                id=question.public_id,
                type=getattr(question.type, "value", question.type),
                statement=question.statement
            ),
            option_selected=option,
            answer_text=submission.answer_text,
            score=submission.score,
            answer_feedback=submission.answer_feedback,
            passed=submission.passed,
            submitted_at=submission.submitted_at
        )
