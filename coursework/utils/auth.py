from fastapi import Depends
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from coursework.core.config import settings
from coursework.database import get_db
from coursework.dependencies import get_session_store
from coursework.services.auth.auth_service import AuthService, CurrentUser

cookie_sec = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)

async def get_current_user(
    session_id: Optional[str] = Depends(cookie_sec),
    db: AsyncSession = Depends(get_db),
    session_store=Depends(get_session_store)
) -> CurrentUser:
    """현재 로그인한 사용자 정보 조회"""
    return await AuthService.get_current_user(db, session_store, session_id)
