import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from coursework import models
from coursework.core.errors import already_submitted
from coursework.services.submission.ports import ActivitySubmissionStore

logger = logging.getLogger(__name__)


class ActivitySubmissionRepository(ActivitySubmissionStore):
    """SQLAlchemy 기반 활동 제출물 저장소

    (activity_id, user_id) 유니크 제약 위반은 ConflictError 로 변환된다.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _reload(self, public_id: str) -> Optional[models.ActivitySubmission]:
        stmt = (
            select(models.ActivitySubmission)
            .where(models.ActivitySubmission.public_id == public_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def create(
        self,
        activity_id: int,
        user_id: int,
        notes: Optional[str]
    ) -> models.ActivitySubmission:
        """새 제출물 생성"""
        submission = models.ActivitySubmission(
            activity_id=activity_id,
            user_id=user_id,
            notes=notes,
            status=models.ActivitySubmissionStatus.CREATED
        )
        try:
            # 세이브포인트 안에서만 되돌리고 바깥 트랜잭션은 유지한다
            async with self.db.begin_nested():
                self.db.add(submission)
                await self.db.flush()
        except IntegrityError as e:
            logger.info(f"Duplicate submission for activity={activity_id} user={user_id}")
            raise already_submitted() from e

        return await self._reload(submission.public_id)

    async def get_by_public_id(self, public_id: str) -> Optional[models.ActivitySubmission]:
        result = await self.db.execute(
            select(models.ActivitySubmission).where(
                models.ActivitySubmission.public_id == public_id,
                models.ActivitySubmission.is_active.is_(True)
            )
        )
        return result.unique().scalar_one_or_none()

    async def get_by_activity_and_user(
        self,
        activity_id: int,
        user_id: int
    ) -> Optional[models.ActivitySubmission]:
        result = await self.db.execute(
            select(models.ActivitySubmission).where(
                models.ActivitySubmission.activity_id == activity_id,
                models.ActivitySubmission.user_id == user_id,
                models.ActivitySubmission.is_active.is_(True)
            )
        )
        return result.unique().scalar_one_or_none()

    async def list_by_activity(
        self,
        activity_id: int,
        limit: int,
        offset: int
    ) -> List[models.ActivitySubmission]:
        """활동별 제출물 목록 (최신 순)"""
        stmt = (
            select(models.ActivitySubmission)
            .where(
                models.ActivitySubmission.activity_id == activity_id,
                models.ActivitySubmission.is_active.is_(True)
            )
            .order_by(models.ActivitySubmission.submitted_at.desc(), models.ActivitySubmission.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())

    async def count_by_activity(self, activity_id: int) -> int:
        result = await self.db.execute(
            select(func.count(models.ActivitySubmission.id)).where(
                models.ActivitySubmission.activity_id == activity_id,
                models.ActivitySubmission.is_active.is_(True)
            )
        )
        return result.scalar() or 0

    async def list_by_user(
        self,
        user_id: int,
        limit: int,
        offset: int
    ) -> List[models.ActivitySubmission]:
        """사용자별 제출물 목록 (최신 순)"""
        stmt = (
            select(models.ActivitySubmission)
            .where(
                models.ActivitySubmission.user_id == user_id,
                models.ActivitySubmission.is_active.is_(True)
            )
            .order_by(models.ActivitySubmission.submitted_at.desc(), models.ActivitySubmission.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())

    async def count_by_user(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(models.ActivitySubmission.id)).where(
                models.ActivitySubmission.user_id == user_id,
                models.ActivitySubmission.is_active.is_(True)
            )
        )
        return result.scalar() or 0

    async def update_status(
        self,
        submission: models.ActivitySubmission,
        status: models.ActivitySubmissionStatus,
        feedback_notes: Optional[str],
        reviewed_by_id: Optional[int],
        reviewed_at: Optional[datetime]
    ) -> models.ActivitySubmission:
        """상태 변경"""
        submission.status = status
        submission.feedback_notes = feedback_notes
        submission.reviewed_by_id = reviewed_by_id
        submission.reviewed_at = reviewed_at
        await self.db.flush()
        return await self._reload(submission.public_id)

    async def update_notes(
        self,
        submission: models.ActivitySubmission,
        notes: Optional[str]
    ) -> models.ActivitySubmission:
        submission.notes = notes
        await self.db.flush()
        return await self._reload(submission.public_id)

    async def create_attachment(
        self,
        submission: models.ActivitySubmission,
        key: str,
        filename: str,
        content_type: str,
        size_bytes: int,
        uploaded_by_id: int
    ) -> models.StoredFile:
        """파일 메타데이터 저장 후 제출물에 연결"""
        stored = models.StoredFile(
            key=key,
            filename=filename,
            content_type=content_type,
            size_bytes=size_bytes,
            uploaded_by_id=uploaded_by_id
        )
        self.db.add(stored)
        await self.db.flush()

        self.db.add(models.ActivitySubmissionAttachment(
            activity_submission_id=submission.id,
            file_id=stored.id
        ))
        await self.db.flush()
        return stored

    async def get_attachment(self, submission_id: int, file_public_id: str) -> Optional[models.StoredFile]:
        stmt = (
            select(models.StoredFile)
            .join(
                models.ActivitySubmissionAttachment,
                models.ActivitySubmissionAttachment.file_id == models.StoredFile.id
            )
            .where(
                models.ActivitySubmissionAttachment.activity_submission_id == submission_id,
                models.StoredFile.public_id == file_public_id,
                models.StoredFile.is_active.is_(True)
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_attachments(self, submission_id: int) -> List[models.StoredFile]:
        stmt = (
            select(models.StoredFile)
            .join(
                models.ActivitySubmissionAttachment,
                models.ActivitySubmissionAttachment.file_id == models.StoredFile.id
            )
            .where(
                models.ActivitySubmissionAttachment.activity_submission_id == submission_id,
                models.StoredFile.is_active.is_(True)
            )
            .order_by(models.StoredFile.created_at.asc(), models.StoredFile.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def delete_attachment(self, attachment: models.StoredFile) -> None:
        """파일 메타데이터 비활성화 (소프트 삭제)"""
        attachment.is_active = False
        await self.db.flush()
