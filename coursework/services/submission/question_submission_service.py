from typing import Optional

from coursework import models
from coursework.core import errors
from coursework.core.config import Settings
from coursework.core.errors import InvalidInputError
from coursework.models import QuestionType
from coursework.services.base_service import BaseService
from coursework.services.submission.activity_submission_service import ActivitySubmissionService
from coursework.services.submission.ports import MembershipOracle, QuestionSubmissionStore
from coursework.utils.pagination import Page, resolve_page

PASS_SCORE = 100
FAIL_SCORE = 0


class QuestionSubmissionService(BaseService):
    """문제 답안 제출과 객관식 자동 채점"""

    def __init__(
        self,
        question_submissions: QuestionSubmissionStore,
        directory: MembershipOracle,
        activity_submissions: ActivitySubmissionService,
        settings: Optional[Settings] = None
    ):
        super().__init__(settings)
        self.question_submissions = question_submissions
        self.directory = directory
        self.activity_submissions = activity_submissions

    @staticmethod
    def _grade_closed_ended(question, option_id: Optional[str]):
        """선택지 채점. (option, score, passed) 반환"""
        if not option_id:
            raise InvalidInputError("선택지를 골라야 합니다")

        selected = next(
            (opt for opt in question.options if opt.public_id == option_id and opt.is_active),
            None
        )
        if selected is None:
            raise InvalidInputError("선택지가 이 문제에 속하지 않습니다")

        if selected.is_correct:
            return selected, PASS_SCORE, True
        return selected, FAIL_SCORE, False

    async def submit_answer(
        self,
        question_id: str,
        user_id: str,
        option_id: Optional[str] = None,
        answer_text: Optional[str] = None,
        activity_id: Optional[str] = None
    ) -> models.QuestionSubmission:
        """답안 제출

        객관식은 즉시 채점하고(정답 100점, 오답 0점) 주관식은 채점하지 않는다.
        ``activity_id`` 가 주어지면 해당 활동의 제출물에 시도를 연결하며,
        제출물이 없으면 새로 만든다.
        """
        question = await self.directory.get_question(question_id)
        if question is None:
            raise errors.question_not_found()

        user = await self.directory.get_user(user_id)
        if user is None:
            raise errors.user_not_found()

        fields = {}
        if question.type == QuestionType.CLOSED_ENDED:
            option, score, passed = self._grade_closed_ended(question, option_id)
            fields.update(question_option_id=option.id, score=score, passed=passed)
        else:
            # 답안은 들여쓰기와 줄바꿈을 포함해 그대로 저장한다
            if not answer_text:
                raise InvalidInputError("답안을 입력해야 합니다")
            fields.update(answer_text=answer_text, score=None, passed=False)

        if activity_id:
            activity = await self.directory.get_activity(activity_id)
            if activity is None:
                raise errors.activity_not_found()
            if not await self.directory.is_activity_item(activity.id, question.id):
                raise errors.activity_item_not_found()
            submission = await self.activity_submissions.get_or_create(activity_id, user_id)
            fields["activity_submission_id"] = submission.id

        return await self.question_submissions.create(question.id, user.id, **fields)

    async def get_by_public_id(self, submission_id: str) -> models.QuestionSubmission:
        submission = await self.question_submissions.get_by_public_id(submission_id)
        if submission is None:
            raise errors.question_submission_not_found()
        return submission

    async def list_mine(
        self,
        user_id: str,
        page: int,
        page_size: int,
        statement: Optional[str] = None
    ) -> Page:
        """내 답안 목록 (문제 지문 검색)"""
        user = await self.directory.get_user(user_id)
        if user is None:
            raise errors.user_not_found()

        statement = self._clean_text(statement)
        total = await self.question_submissions.count_by_user(user.id, statement)
        page, offset = resolve_page(page, page_size, total)
        items = await self.question_submissions.list_by_user(user.id, page_size, offset, statement)
        return Page(items=items, page_number=page, page_size=page_size, total_items=total)

    async def list_by_question(self, question_id: str, page: int, page_size: int) -> Page:
        question = await self.directory.get_question(question_id)
        if question is None:
            raise errors.question_not_found()

        total = await self.question_submissions.count_by_question(question.id)
        page, offset = resolve_page(page, page_size, total)
        items = await self.question_submissions.list_by_question(question.id, page_size, offset)
        return Page(items=items, page_number=page, page_size=page_size, total_items=total)
