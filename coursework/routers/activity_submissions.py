from fastapi import APIRouter, Depends, UploadFile, File, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from coursework.core.config import settings
from coursework.core.errors import FileTooLargeError
from coursework.database import get_db
from coursework.dependencies import get_activity_submission_service
from coursework.services.auth.auth_service import CurrentUser
from coursework.services.submission.activity_submission_service import ActivitySubmissionService
from coursework.utils.auth import get_current_user
from coursework.utils.pagination import parse_pagination
from coursework.schemas.base import PageResponse
from coursework.schemas.activity_submission import (
    SubmitActivityRequest,
    ReviewActivitySubmissionRequest,
    UpdateActivitySubmissionNotesRequest,
    ActivitySubmissionResponse,
    QuestionStatusResponse,
    SubmissionAttachmentResponse
)
from coursework.schemas.question_submission import QuestionSubmissionResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["activity-submissions"])


@router.post(
    "/activities/{activity_id}/submissions",
    response_model=ActivitySubmissionResponse,
    status_code=201
)
async def submit_activity(
    activity_id: str,
    body: Optional[SubmitActivityRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    """활동 제출"""
    notes = body.notes if body else None
    submission = await service.submit(activity_id, current_user.public_id, notes)
    await db.commit()
    logger.info(f"Activity submitted: activity={activity_id} user={current_user.public_id}")
    return ActivitySubmissionResponse.from_model(submission)


@router.get(
    "/activities/{activity_id}/submissions/mine",
    response_model=Optional[ActivitySubmissionResponse]
)
async def get_my_submission(
    activity_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    """내 제출물 조회. 없으면 null"""
    submission = await service.get_mine(activity_id, current_user.public_id)
    if submission is None:
        return None
    return ActivitySubmissionResponse.from_model(submission)


@router.get(
    "/activities/{activity_id}/submissions",
    response_model=PageResponse[ActivitySubmissionResponse]
)
async def list_activity_submissions(
    activity_id: str,
    page_number: Optional[str] = None,
    page_size: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    """활동의 전체 제출물 (관리자, 감독자)"""
    page, size = parse_pagination(page_number, page_size)
    result = await service.list_by_activity(
        activity_id,
        current_user.public_id,
        current_user.role,
        page,
        size
    )
    return PageResponse[ActivitySubmissionResponse].from_page(result, ActivitySubmissionResponse.from_model)


@router.get(
    "/activities/{activity_id}/question-status",
    response_model=Optional[List[QuestionStatusResponse]]
)
async def get_question_status(
    activity_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    """활동 내 문제별 진행 상태. 제출물이 없으면 null"""
    statuses = await service.get_question_statuses(activity_id, current_user.public_id)
    if statuses is None:
        return None
    return [QuestionStatusResponse.model_validate(status) for status in statuses]


@router.get("/me/activity-submissions", response_model=PageResponse[ActivitySubmissionResponse])
async def list_my_submissions(
    page_number: Optional[str] = None,
    page_size: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    page, size = parse_pagination(page_number, page_size)
    result = await service.list_mine(current_user.public_id, page, size)
    return PageResponse[ActivitySubmissionResponse].from_page(result, ActivitySubmissionResponse.from_model)


@router.get("/activity-submissions/{submission_id}", response_model=ActivitySubmissionResponse)
async def get_submission(
    submission_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    submission = await service.get_by_public_id(submission_id)
    return ActivitySubmissionResponse.from_model(submission)


@router.put("/activity-submissions/{submission_id}/review", response_model=ActivitySubmissionResponse)
async def review_submission(
    submission_id: str,
    body: ReviewActivitySubmissionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    """제출물 승인/반려 (그룹 관리자)"""
    submission = await service.review(
        submission_id,
        current_user.public_id,
        current_user.role,
        body.status,
        body.feedback_notes
    )
    await db.commit()
    logger.info(f"Submission reviewed: {submission_id} -> {body.status} by {current_user.public_id}")
    return ActivitySubmissionResponse.from_model(submission)


@router.put("/activity-submissions/{submission_id}", response_model=ActivitySubmissionResponse)
async def update_submission_notes(
    submission_id: str,
    body: UpdateActivitySubmissionNotesRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    submission = await service.update_notes(submission_id, current_user.public_id, body.notes)
    await db.commit()
    return ActivitySubmissionResponse.from_model(submission)


@router.post("/activity-submissions/{submission_id}/resubmit", response_model=ActivitySubmissionResponse)
async def resubmit_submission(
    submission_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    """재제출 (피드백 초기화)"""
    submission = await service.resubmit(submission_id, current_user.public_id)
    await db.commit()
    return ActivitySubmissionResponse.from_model(submission)


@router.post("/activity-submissions/{submission_id}/send", response_model=ActivitySubmissionResponse)
async def send_submission(
    submission_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    """검토 요청"""
    submission = await service.send_submission(submission_id, current_user.public_id)
    await db.commit()
    return ActivitySubmissionResponse.from_model(submission)


@router.get(
    "/activity-submissions/{submission_id}/question-attempts",
    response_model=List[QuestionSubmissionResponse]
)
async def get_submission_question_attempts(
    submission_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    attempts = await service.get_submission_question_attempts(
        submission_id,
        current_user.public_id,
        current_user.role
    )
    return [QuestionSubmissionResponse.from_model(attempt) for attempt in attempts]


@router.get(
    "/activity-submissions/{submission_id}/attachments",
    response_model=List[SubmissionAttachmentResponse]
)
async def list_attachments(
    submission_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service)
):
    attachments = await service.list_attachments(submission_id, current_user.public_id)
    return [SubmissionAttachmentResponse.from_attachment(a) for a in attachments]


@router.post(
    "/activity-submissions/{submission_id}/attachments",
    response_model=SubmissionAttachmentResponse,
    status_code=201
)
async def upload_attachment(
    submission_id: str,
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    """첨부파일 업로드"""
    limit = settings.MAX_SUBMISSION_ATTACHMENT_SIZE
    # 제한보다 1바이트 더 읽어 초과 여부만 확인한다
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError()

    attachment = await service.upload_attachment(
        submission_id,
        current_user.public_id,
        file.filename,
        file.content_type or "application/octet-stream",
        data
    )
    await db.commit()
    logger.info(f"Attachment uploaded: submission={submission_id} file={attachment.public_id}")
    return SubmissionAttachmentResponse.from_attachment(attachment)


@router.delete("/activity-submissions/{submission_id}/attachments/{file_id}", status_code=204)
async def delete_attachment(
    submission_id: str,
    file_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ActivitySubmissionService = Depends(get_activity_submission_service),
    db: AsyncSession = Depends(get_db)
):
    await service.delete_attachment(submission_id, file_id, current_user.public_id)
    await db.commit()
    return Response(status_code=204)
