from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from coursework import models
from dataclasses import dataclass
from typing import Optional, Dict
import uuid
import logging
from datetime import datetime
from coursework.core.errors import UnauthorizedError, ForbiddenError, invalid_credentials

logger = logging.getLogger(__name__)


@dataclass
class CurrentUser:
    """세션에서 확인한 호출자"""
    public_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == models.UserRole.ADMIN


class AuthService:
    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[models.User]:
        stmt = select(models.User).where(models.User.email == email.strip().lower())
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_public_id(db: AsyncSession, public_id: str) -> Optional[models.User]:
        stmt = select(models.User).where(models.User.public_id == public_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def authenticate(db: AsyncSession, email: str, password: str) -> models.User:
        """사용자 인증"""
        user = await AuthService.get_user_by_email(db, email)
        if not user or not user.verify_password(password):
            raise invalid_credentials()

        if not user.is_active:
            raise ForbiddenError("비활성화된 계정입니다")

        return user

    @staticmethod
    async def create_session(session_store, user: models.User) -> tuple[str, Dict]:
        """세션 생성"""
        session_id = str(uuid.uuid4())
        session_data = {
            "user_id": user.public_id,
            "role": models.UserRole(user.role).value,
            "created_at": datetime.now().isoformat()
        }

        await session_store.create_session(session_id, session_data)
        return session_id, session_data

    @staticmethod
    async def login(
        db: AsyncSession,
        session_store,
        email: str,
        password: str
    ) -> tuple[models.User, str]:
        """로그인 처리"""
        user = await AuthService.authenticate(db, email, password)
        session_id, _ = await AuthService.create_session(session_store, user)
        logger.info(f"User logged in: {user.public_id}")
        return user, session_id

    @staticmethod
    async def logout(session_store, session_id: Optional[str]) -> None:
        """세션 삭제 (로그아웃)"""
        if session_id:
            await session_store.delete_session(session_id)

    @staticmethod
    async def get_current_user(
        db: AsyncSession,
        session_store,
        session_id: Optional[str]
    ) -> CurrentUser:
        """현재 로그인한 사용자 조회"""
        if not session_id:
            raise UnauthorizedError()

        session_data = await session_store.get_session(session_id)
        if not session_data:
            raise UnauthorizedError("세션이 만료되었습니다")

        user = await AuthService.get_user_by_public_id(db, session_data["user_id"])
        if not user or not user.is_active:
            # 세션은 있지만 사용자가 없거나 비활성화된 경우 세션도 삭제
            await session_store.delete_session(session_id)
            raise UnauthorizedError("사용자를 찾을 수 없습니다")

        return CurrentUser(public_id=user.public_id, role=models.UserRole(user.role).value)
