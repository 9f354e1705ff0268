from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from coursework.core.config import settings
from coursework.database import get_db
from coursework.dependencies import get_session_store
from coursework.services.auth.auth_service import AuthService, CurrentUser
from coursework.utils.auth import cookie_sec, get_current_user
from coursework.schemas.user import LoginRequest, UserResponse, CurrentUserResponse

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    """현재 로그인한 사용자 정보 조회"""
    return CurrentUserResponse(id=current_user.public_id, role=current_user.role)


@router.post("/login", response_model=UserResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    session_store=Depends(get_session_store)
):
    """로그인"""
    user, session_id = await AuthService.login(
        db,
        session_store,
        login_data.email,
        login_data.password
    )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        max_age=settings.SESSION_EXPIRE_HOURS * 3600,
        samesite='lax',
        secure=settings.COOKIE_SECURE
    )
    return UserResponse.from_model(user)


@router.post("/logout", status_code=204)
async def logout(
    session_id: Optional[str] = Depends(cookie_sec),
    session_store=Depends(get_session_store)
):
    """로그아웃"""
    await AuthService.logout(session_store, session_id)
    response = Response(status_code=204)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)
    return response
