from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from coursework.database import get_db
from coursework.dependencies import get_question_submission_service
from coursework.services.auth.auth_service import CurrentUser
from coursework.services.submission.question_submission_service import QuestionSubmissionService
from coursework.utils.auth import get_current_user
from coursework.utils.pagination import parse_pagination
from coursework.schemas.base import PageResponse
from coursework.schemas.question_submission import SubmitAnswerRequest, QuestionSubmissionResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["question-submissions"])


@router.post(
    "/questions/{question_id}/submissions",
    response_model=QuestionSubmissionResponse,
    status_code=201
)
async def submit_answer(
    question_id: str,
    body: SubmitAnswerRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: QuestionSubmissionService = Depends(get_question_submission_service),
    db: AsyncSession = Depends(get_db)
):
    """답안 제출 (객관식은 즉시 채점)"""
    submission = await service.submit_answer(
        question_id,
        current_user.public_id,
        option_id=body.question_option_id,
        answer_text=body.answer_text,
        activity_id=body.activity_id
    )
    await db.commit()
    logger.info(
        f"Answer submitted: question={question_id} user={current_user.public_id} passed={submission.passed}"
    )
    return QuestionSubmissionResponse.from_model(submission)


@router.get(
    "/questions/{question_id}/submissions",
    response_model=PageResponse[QuestionSubmissionResponse]
)
async def list_question_submissions(
    question_id: str,
    page_number: Optional[str] = None,
    page_size: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: QuestionSubmissionService = Depends(get_question_submission_service)
):
    page, size = parse_pagination(page_number, page_size)
    result = await service.list_by_question(question_id, page, size)
    return PageResponse[QuestionSubmissionResponse].from_page(result, QuestionSubmissionResponse.from_model)


@router.get("/me/submissions", response_model=PageResponse[QuestionSubmissionResponse])
async def list_my_answers(
    page_number: Optional[str] = None,
    page_size: Optional[str] = None,
    statement: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: QuestionSubmissionService = Depends(get_question_submission_service)
):
    """내 답안 목록 (문제 지문 검색)"""
    page, size = parse_pagination(page_number, page_size)
    result = await service.list_mine(current_user.public_id, page, size, statement)
    return PageResponse[QuestionSubmissionResponse].from_page(result, QuestionSubmissionResponse.from_model)


@router.get("/me/submissions/{submission_id}", response_model=QuestionSubmissionResponse)
async def get_my_answer(
    submission_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: QuestionSubmissionService = Depends(get_question_submission_service)
):
    submission = await service.get_by_public_id(submission_id)
    return QuestionSubmissionResponse.from_model(submission)
