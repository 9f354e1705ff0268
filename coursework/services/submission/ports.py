"""제출물 서비스가 의존하는 저장소 계약

서비스는 아래 추상 클래스에만 의존한다. SQLAlchemy 구현은
``submission_repository``, ``question_submission_repository``,
``services/group/membership_repository`` 에 있고, 테스트는 메모리 구현을 쓴다.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional


class ActivitySubmissionStore(ABC):
    """활동 제출물 저장소

    (activity_id, user_id) 쌍마다 제출물은 최대 하나다. 서비스의
    조회 후 생성 순서는 원자적이지 않으므로, 구현체는 유니크 제약 등으로
    이 조건을 직접 보장해야 하며 위반 시 ``create`` 에서
    ``ConflictError`` (ACTIVITY_ALREADY_SUBMITTED) 를 발생시켜야 한다.
    """

    @abstractmethod
    async def create(self, activity_id: int, user_id: int, notes: Optional[str]) -> Any:
        """``created`` 상태의 제출물 생성"""
        ...

    @abstractmethod
    async def get_by_public_id(self, public_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def get_by_activity_and_user(self, activity_id: int, user_id: int) -> Optional[Any]:
        ...

    @abstractmethod
    async def list_by_activity(self, activity_id: int, limit: int, offset: int) -> List[Any]:
        """최신 제출 순"""
        ...

    @abstractmethod
    async def count_by_activity(self, activity_id: int) -> int:
        ...

    @abstractmethod
    async def list_by_user(self, user_id: int, limit: int, offset: int) -> List[Any]:
        """최신 제출 순"""
        ...

    @abstractmethod
    async def count_by_user(self, user_id: int) -> int:
        ...

    @abstractmethod
    async def update_status(
        self,
        submission: Any,
        status: Any,
        feedback_notes: Optional[str],
        reviewed_by_id: Optional[int],
        reviewed_at: Optional[datetime]
    ) -> Any:
        """상태, 피드백, 검토자, 검토 시각 저장"""
        ...

    @abstractmethod
    async def update_notes(self, submission: Any, notes: Optional[str]) -> Any:
        ...

    @abstractmethod
    async def create_attachment(
        self,
        submission: Any,
        key: str,
        filename: str,
        content_type: str,
        size_bytes: int,
        uploaded_by_id: int
    ) -> Any:
        """파일 메타데이터를 저장하고 제출물에 연결"""
        ...

    @abstractmethod
    async def get_attachment(self, submission_id: int, file_public_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def list_attachments(self, submission_id: int) -> List[Any]:
        """오래된 순"""
        ...

    @abstractmethod
    async def delete_attachment(self, attachment: Any) -> None:
        ...


class QuestionSubmissionStore(ABC):
    """문제 답안 제출 저장소"""

    @abstractmethod
    async def create(
        self,
        question_id: int,
        user_id: int,
        question_option_id: Optional[int] = None,
        answer_text: Optional[str] = None,
        score: Optional[int] = None,
        passed: bool = False,
        activity_submission_id: Optional[int] = None
    ) -> Any:
        ...

    @abstractmethod
    async def get_by_public_id(self, public_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def list_by_user(
        self,
        user_id: int,
        limit: int,
        offset: int,
        statement: Optional[str] = None
    ) -> List[Any]:
        ...

    @abstractmethod
    async def count_by_user(self, user_id: int, statement: Optional[str] = None) -> int:
        ...

    @abstractmethod
    async def list_by_question(self, question_id: int, limit: int, offset: int) -> List[Any]:
        ...

    @abstractmethod
    async def count_by_question(self, question_id: int) -> int:
        ...

    @abstractmethod
    async def list_by_activity_submission(self, submission: Any) -> List[Any]:
        """제출물의 활동 항목에 속한 문제들에 대한 소유자의 시도. 최신 순"""
        ...


class MembershipOracle(ABC):
    """활동, 사용자, 문제 조회와 그룹 멤버십 확인"""

    @abstractmethod
    async def get_activity(self, public_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def get_activity_by_id(self, activity_id: int) -> Optional[Any]:
        ...

    @abstractmethod
    async def get_user(self, public_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def get_question(self, public_id: str) -> Optional[Any]:
        """선택지를 포함한 문제"""
        ...

    @abstractmethod
    async def is_activity_item(self, activity_id: int, question_id: int) -> bool:
        ...

    @abstractmethod
    async def get_member(self, group_id: int, user_id: int) -> Optional[Any]:
        """``role``, ``is_active``, ``accepted_by_id`` 를 가진 멤버 또는 None"""
        ...
