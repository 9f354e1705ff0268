import logging
from typing import List, Optional
from sqlalchemy import select, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession
from coursework import models
from coursework.services.submission.ports import QuestionSubmissionStore

logger = logging.getLogger(__name__)


class QuestionSubmissionRepository(QuestionSubmissionStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    def _by_user(self, user_id: int, statement: Optional[str]):
        conditions = [
            models.QuestionSubmission.user_id == user_id,
            models.QuestionSubmission.is_active.is_(True)
        ]
        if statement:
            conditions.append(
                models.QuestionSubmission.question_id.in_(
                    select(models.Question.id).where(models.Question.statement.ilike(f"%{statement}%"))
                )
            )
        return conditions

    async def create(
        self,
        question_id: int,
        user_id: int,
        question_option_id: Optional[int] = None,
        answer_text: Optional[str] = None,
        score: Optional[int] = None,
        passed: bool = False,
        activity_submission_id: Optional[int] = None
    ) -> models.QuestionSubmission:
        """답안 제출 저장"""
        submission = models.QuestionSubmission(
            question_id=question_id,
            user_id=user_id,
            question_option_id=question_option_id,
            answer_text=answer_text,
            score=score,
            passed=passed,
            activity_submission_id=activity_submission_id
        )
        self.db.add(submission)
        await self.db.flush()

        stmt = (
            select(models.QuestionSubmission)
            .where(models.QuestionSubmission.id == submission.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.unique().scalar_one()

    async def get_by_public_id(self, public_id: str) -> Optional[models.QuestionSubmission]:
        result = await self.db.execute(
            select(models.QuestionSubmission).where(
                models.QuestionSubmission.public_id == public_id,
                models.QuestionSubmission.is_active.is_(True)
            )
        )
        return result.unique().scalar_one_or_none()

    async def list_by_user(
        self,
        user_id: int,
        limit: int,
        offset: int,
        statement: Optional[str] = None
    ) -> List[models.QuestionSubmission]:
        stmt = (
            select(models.QuestionSubmission)
            .where(*self._by_user(user_id, statement))
            .order_by(models.QuestionSubmission.submitted_at.desc(), models.QuestionSubmission.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())

    async def count_by_user(self, user_id: int, statement: Optional[str] = None) -> int:
        result = await self.db.execute(
            select(func.count(models.QuestionSubmission.id)).where(*self._by_user(user_id, statement))
        )
        return result.scalar() or 0

    async def list_by_question(
        self,
        question_id: int,
        limit: int,
        offset: int
    ) -> List[models.QuestionSubmission]:
        stmt = (
            select(models.QuestionSubmission)
            .where(
                models.QuestionSubmission.question_id == question_id,
                models.QuestionSubmission.is_active.is_(True)
            )
            .order_by(models.QuestionSubmission.submitted_at.desc(), models.QuestionSubmission.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())

    async def count_by_question(self, question_id: int) -> int:
        result = await self.db.execute(
            select(func.count(models.QuestionSubmission.id)).where(
                models.QuestionSubmission.question_id == question_id,
                models.QuestionSubmission.is_active.is_(True)
            )
        )
        return result.scalar() or 0

    async def list_by_activity_submission(
        self,
        submission: models.ActivitySubmission
    ) -> List[models.QuestionSubmission]:
        """활동 항목 -> 문제 -> 제출물 소유자 순으로 연결된 시도 목록 (최신 순)"""
        item_questions = select(models.ActivityItem.question_id).where(
            models.ActivityItem.activity_id == submission.activity_id,
            models.ActivityItem.question_id.is_not(None)
        )
        stmt = (
            select(models.QuestionSubmission)
            .where(
                models.QuestionSubmission.is_active.is_(True),
                or_(
                    models.QuestionSubmission.activity_submission_id == submission.id,
                    and_(
                        models.QuestionSubmission.user_id == submission.user_id,
                        models.QuestionSubmission.question_id.in_(item_questions)
                    )
                )
            )
            .order_by(models.QuestionSubmission.submitted_at.desc(), models.QuestionSubmission.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.unique().scalars().all())
