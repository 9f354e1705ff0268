"""활동 제출물 생명주기

상태 전이:

    (없음)  --submit / get_or_create-->  created
    (모든 상태)  --send_submission-->  pending
    (모든 상태)  --resubmit-->  pending (피드백, 검토자 초기화)
    (모든 상태)  --review-->  approved | reproved

send_submission, resubmit, update_notes, 첨부파일 작업에는 상태 조건이 없다.
이 서비스는 상태를 갖지 않으며 로그를 남기지 않는다. 모든 오류는 호출자에게
전파되며, 예외는 저장소 객체 정리(best-effort) 두 경우뿐이다.
"""
import os
import uuid
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from coursework import models
from coursework.core.config import Settings
from coursework.models._common import utcnow
from coursework.core import errors
from coursework.core.errors import (
    ConflictError,
    FileTooLargeError,
    ForbiddenError,
    InvalidFileTypeError,
    InvalidInputError,
    UploadFailedError,
)
from coursework.models import ActivitySubmissionStatus, UserRole
from coursework.services.base_service import BaseService
from coursework.services.file.file_service import ObjectStorage
from coursework.services.group.membership_repository import (
    is_group_admin,
    is_group_admin_or_supervisor,
    is_member,
)
from coursework.services.submission.ports import (
    ActivitySubmissionStore,
    MembershipOracle,
    QuestionSubmissionStore,
)
from coursework.utils.pagination import Page, resolve_page

REVIEW_STATUSES = (ActivitySubmissionStatus.APPROVED, ActivitySubmissionStatus.REPROVED)


@dataclass(frozen=True)
class AttachmentPolicy:
    """제출물 첨부파일 허용 형식과 최대 크기"""
    allowed_content_types: FrozenSet[str]
    max_size_bytes: int
    key_prefix: str = "activity-submissions"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AttachmentPolicy":
        return cls(
            allowed_content_types=frozenset(settings.ALLOWED_SUBMISSION_ATTACHMENT_TYPES),
            max_size_bytes=settings.MAX_SUBMISSION_ATTACHMENT_SIZE
        )


@dataclass
class ResolvedAttachment:
    public_id: str
    filename: str
    content_type: str
    size_bytes: int
    url: str


@dataclass
class QuestionStatus:
    question_id: str
    passed: bool
    attempts: int
    last_score: Optional[int] = None


def _is_platform_admin(role) -> bool:
    return role == UserRole.ADMIN


class ActivitySubmissionService(BaseService):

    def __init__(
        self,
        submissions: ActivitySubmissionStore,
        question_submissions: QuestionSubmissionStore,
        directory: MembershipOracle,
        storage: ObjectStorage,
        policy: Optional[AttachmentPolicy] = None,
        settings: Optional[Settings] = None
    ):
        super().__init__(settings)
        self.submissions = submissions
        self.question_submissions = question_submissions
        self.directory = directory
        self.storage = storage
        self.policy = policy or AttachmentPolicy.from_settings(self.settings)

    # ------------------------------------------------------------------
    # 조회 헬퍼
    # ------------------------------------------------------------------

    async def _require_activity(self, activity_id: str):
        activity = await self.directory.get_activity(activity_id)
        if activity is None:
            raise errors.activity_not_found()
        return activity

    async def _require_user(self, user_id: str):
        user = await self.directory.get_user(user_id)
        if user is None:
            raise errors.user_not_found()
        return user

    async def _require_submission(self, submission_id: str):
        submission = await self.submissions.get_by_public_id(submission_id)
        if submission is None:
            raise errors.submission_not_found()
        return submission

    async def _require_owned_submission(self, submission_id: str, user_id: str):
        """제출물과 소유자 확인. 소유자가 아니면 ForbiddenError"""
        submission = await self._require_submission(submission_id)
        user = await self._require_user(user_id)
        if submission.user_id != user.id:
            raise ForbiddenError()
        return submission, user

    async def _require_activity_of(self, submission):
        activity = await self.directory.get_activity_by_id(submission.activity_id)
        if activity is None:
            raise errors.activity_not_found()
        return activity

    # ------------------------------------------------------------------
    # 제출
    # ------------------------------------------------------------------

    async def submit(
        self,
        activity_id: str,
        user_id: str,
        notes: Optional[str] = None
    ) -> models.ActivitySubmission:
        """활동 제출물 생성 (created)"""
        activity = await self._require_activity(activity_id)
        user = await self._require_user(user_id)

        if not await is_member(self.directory, activity.group_id, user.id):
            raise ForbiddenError()

        existing = await self.submissions.get_by_activity_and_user(activity.id, user.id)
        if existing is not None:
            raise errors.already_submitted()

        return await self.submissions.create(activity.id, user.id, self._clean_text(notes))

    async def get_or_create(self, activity_id: str, user_id: str) -> models.ActivitySubmission:
        """기존 제출물 반환, 없으면 생성. ConflictError 를 내지 않는다"""
        activity = await self._require_activity(activity_id)
        user = await self._require_user(user_id)

        if not await is_member(self.directory, activity.group_id, user.id):
            raise ForbiddenError()

        activity_pk, user_pk = activity.id, user.id
        existing = await self.submissions.get_by_activity_and_user(activity_pk, user_pk)
        if existing is not None:
            return existing

        try:
            return await self.submissions.create(activity_pk, user_pk, None)
        except ConflictError:
            # 동시에 생성된 경우 저장소의 유니크 제약이 막아준 행을 다시 읽는다
            existing = await self.submissions.get_by_activity_and_user(activity_pk, user_pk)
            if existing is None:
                raise
            return existing

    async def get_mine(self, activity_id: str, user_id: str) -> Optional[models.ActivitySubmission]:
        """내 제출물. 제출하지 않았으면 None"""
        activity = await self._require_activity(activity_id)
        user = await self._require_user(user_id)
        return await self.submissions.get_by_activity_and_user(activity.id, user.id)

    async def get_by_public_id(self, submission_id: str) -> models.ActivitySubmission:
        return await self._require_submission(submission_id)

    # ------------------------------------------------------------------
    # 목록
    # ------------------------------------------------------------------

    async def list_by_activity(
        self,
        activity_id: str,
        caller_id: str,
        caller_role,
        page: int,
        page_size: int
    ) -> Page:
        """활동의 전체 제출물 (플랫폼 관리자, 그룹 관리자/감독자만)"""
        activity = await self._require_activity(activity_id)
        caller = await self._require_user(caller_id)

        if not _is_platform_admin(caller_role):
            if not await is_group_admin_or_supervisor(self.directory, activity.group_id, caller.id):
                raise ForbiddenError()

        total = await self.submissions.count_by_activity(activity.id)
        # 마지막 페이지를 넘는 요청은 그대로 둔다 (빈 페이지)
        page, offset = resolve_page(page, page_size, total, clamp_to_last=False)
        items = await self.submissions.list_by_activity(activity.id, page_size, offset)
        return Page(items=items, page_number=page, page_size=page_size, total_items=total)

    async def list_mine(self, user_id: str, page: int, page_size: int) -> Page:
        """내 제출물 목록 (최신 순)"""
        user = await self._require_user(user_id)

        total = await self.submissions.count_by_user(user.id)
        page, offset = resolve_page(page, page_size, total)
        items = await self.submissions.list_by_user(user.id, page_size, offset)
        return Page(items=items, page_number=page, page_size=page_size, total_items=total)

    # ------------------------------------------------------------------
    # 상태 전이
    # ------------------------------------------------------------------

    async def review(
        self,
        submission_id: str,
        reviewer_id: str,
        reviewer_role,
        status,
        feedback_notes: Optional[str] = None
    ) -> models.ActivitySubmission:
        """승인 또는 반려"""
        try:
            new_status = ActivitySubmissionStatus(status)
        except ValueError:
            raise InvalidInputError("검토 상태는 approved 또는 reproved 여야 합니다")
        if new_status not in REVIEW_STATUSES:
            raise InvalidInputError("검토 상태는 approved 또는 reproved 여야 합니다")

        submission = await self._require_submission(submission_id)
        reviewer = await self._require_user(reviewer_id)
        activity = await self._require_activity_of(submission)

        if not _is_platform_admin(reviewer_role):
            if not await is_group_admin(self.directory, activity.group_id, reviewer.id):
                raise ForbiddenError()

        return await self.submissions.update_status(
            submission,
            new_status,
            feedback_notes=self._clean_text(feedback_notes),
            reviewed_by_id=reviewer.id,
            reviewed_at=utcnow()
        )

    async def send_submission(self, submission_id: str, user_id: str) -> models.ActivitySubmission:
        """검토 요청 (모든 상태에서 pending 으로)"""
        submission, _ = await self._require_owned_submission(submission_id, user_id)
        return await self.submissions.update_status(
            submission,
            ActivitySubmissionStatus.PENDING,
            feedback_notes=submission.feedback_notes,
            reviewed_by_id=submission.reviewed_by_id,
            reviewed_at=submission.reviewed_at
        )

    async def resubmit(self, submission_id: str, user_id: str) -> models.ActivitySubmission:
        """재제출. 피드백과 검토자를 지우고 pending 으로"""
        submission, _ = await self._require_owned_submission(submission_id, user_id)
        return await self.submissions.update_status(
            submission,
            ActivitySubmissionStatus.PENDING,
            feedback_notes=None,
            reviewed_by_id=None,
            reviewed_at=None
        )

    async def update_notes(
        self,
        submission_id: str,
        user_id: str,
        notes: Optional[str]
    ) -> models.ActivitySubmission:
        submission, _ = await self._require_owned_submission(submission_id, user_id)
        return await self.submissions.update_notes(submission, self._clean_text(notes))

    # ------------------------------------------------------------------
    # 첨부파일
    # ------------------------------------------------------------------

    def _resolve(self, stored) -> ResolvedAttachment:
        return ResolvedAttachment(
            public_id=stored.public_id,
            filename=stored.filename,
            content_type=stored.content_type,
            size_bytes=stored.size_bytes,
            url=self.storage.public_url(stored.key)
        )

    def _validate_attachment(self, content_type: str, size: int) -> None:
        if content_type not in self.policy.allowed_content_types:
            raise InvalidFileTypeError()
        if size > self.policy.max_size_bytes:
            raise FileTooLargeError()

    async def upload_attachment(
        self,
        submission_id: str,
        user_id: str,
        filename: str,
        content_type: str,
        data: bytes
    ) -> ResolvedAttachment:
        """첨부파일 업로드. 저장소에 먼저 쓰고 메타데이터를 저장한다"""
        submission, user = await self._require_owned_submission(submission_id, user_id)

        size = len(data)
        self._validate_attachment(content_type, size)

        filename = (filename or "").strip() or "attachment"
        ext = os.path.splitext(filename)[1].lower()
        key = f"{self.policy.key_prefix}/{uuid.uuid4()}{ext}"

        try:
            url = await self.storage.upload(key, content_type, data)
        except Exception as e:
            raise UploadFailedError() from e

        try:
            stored = await self.submissions.create_attachment(
                submission,
                key=key,
                filename=filename,
                content_type=content_type,
                size_bytes=size,
                uploaded_by_id=user.id
            )
        except Exception:
            # 메타데이터 저장 실패 시 업로드한 객체를 지운다 (실패는 무시)
            await self._delete_object_safely(self.storage, key)
            raise

        return ResolvedAttachment(
            public_id=stored.public_id,
            filename=stored.filename,
            content_type=stored.content_type,
            size_bytes=stored.size_bytes,
            url=url
        )

    async def delete_attachment(self, submission_id: str, attachment_id: str, user_id: str) -> None:
        """첨부파일 삭제. 메타데이터 삭제가 기준이다"""
        submission, _ = await self._require_owned_submission(submission_id, user_id)

        stored = await self.submissions.get_attachment(submission.id, attachment_id)
        if stored is None:
            raise errors.attachment_not_found()

        await self._delete_object_safely(self.storage, stored.key)
        await self.submissions.delete_attachment(stored)

    async def list_attachments(self, submission_id: str, user_id: str) -> List[ResolvedAttachment]:
        # 소유자 확인 없음. 제출물만 존재하면 된다
        submission = await self._require_submission(submission_id)
        stored_files = await self.submissions.list_attachments(submission.id)
        return [self._resolve(stored) for stored in stored_files]

    # ------------------------------------------------------------------
    # 문제별 상태
    # ------------------------------------------------------------------

    async def get_question_statuses(self, activity_id: str, user_id: str) -> Optional[List[QuestionStatus]]:
        """활동 내 문제별 통과 여부, 시도 횟수, 마지막 점수

        제출물이 없으면 None. 시도는 submitted_at, id 기준 최신 순으로 정렬하며
        last_score 는 점수가 있는 가장 최근 시도의 점수다.
        """
        activity = await self._require_activity(activity_id)
        user = await self._require_user(user_id)

        submission = await self.submissions.get_by_activity_and_user(activity.id, user.id)
        if submission is None:
            return None

        attempts = await self.question_submissions.list_by_activity_submission(submission)
        attempts = sorted(attempts, key=lambda a: (a.submitted_at, a.id), reverse=True)

        by_question: Dict[int, QuestionStatus] = {}
        for attempt in attempts:
            status = by_question.get(attempt.question_id)
            if status is None:
                status = QuestionStatus(question_id=attempt.question.public_id, passed=False, attempts=0)
                by_question[attempt.question_id] = status
            status.attempts += 1
            if attempt.passed:
                status.passed = True
            if status.last_score is None and attempt.score is not None:
                status.last_score = attempt.score

        return list(by_question.values())

    async def get_submission_question_attempts(
        self,
        submission_id: str,
        caller_id: str,
        caller_role
    ) -> List[models.QuestionSubmission]:
        """제출물에 연결된 모든 답안 시도 (플랫폼 관리자, 그룹 관리자/감독자만)"""
        submission = await self._require_submission(submission_id)
        caller = await self._require_user(caller_id)

        if not _is_platform_admin(caller_role):
            activity = await self._require_activity_of(submission)
            if not await is_group_admin_or_supervisor(self.directory, activity.group_id, caller.id):
                raise ForbiddenError()

        return await self.question_submissions.list_by_activity_submission(submission)
