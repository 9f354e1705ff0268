import redis.asyncio as redis
from redis.exceptions import RedisError
from typing import Optional, Dict
import json
import logging
from coursework.core.config import Settings, settings as default_settings
from coursework.core.session import MemorySessionStore

logger = logging.getLogger(__name__)

class RedisSessionStore:
    """Redis 세션 저장소. 키는 ``<REDIS_PREFIX>session:<id>``"""

    def __init__(self, settings: Settings = default_settings, client: Optional[redis.Redis] = None):
        self.redis = client or redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True
        )
        self.prefix = settings.REDIS_PREFIX
        self.ttl_seconds = settings.SESSION_EXPIRE_HOURS * 3600

    def key_for(self, session_id: str) -> str:
        return f"{self.prefix}session:{session_id}"

    async def create_session(self, session_id: str, data: Dict, expire: Optional[int] = None) -> None:
        """세션 생성"""
        try:
            await self.redis.set(self.key_for(session_id), json.dumps(data), ex=expire or self.ttl_seconds)
        except RedisError as e:
            logger.error(f"세션 생성 중 오류 발생: {str(e)}")
            raise

    async def get_session(self, session_id: str) -> Optional[Dict]:
        """세션 조회. 조회할 때마다 만료 시간을 갱신한다"""
        try:
            raw = await self.redis.getex(self.key_for(session_id), ex=self.ttl_seconds)
        except RedisError as e:
            logger.error(f"세션 조회 중 오류 발생: {str(e)}")
            raise
        return json.loads(raw) if raw else None

    async def delete_session(self, session_id: str) -> None:
        """세션 삭제"""
        try:
            await self.redis.delete(self.key_for(session_id))
        except RedisError as e:
            logger.error(f"세션 삭제 중 오류 발생: {str(e)}")
            raise

    async def cleanup(self) -> None:
        """연결 종료"""
        await self.redis.aclose()


def build_session_store(settings: Settings = default_settings):
    """SESSION_BACKEND 설정에 맞는 세션 저장소 생성"""
    if settings.SESSION_BACKEND == "redis":
        logger.info(f"Using redis session store at {settings.REDIS_URL}")
        return RedisSessionStore(settings)
    return MemorySessionStore(expire_seconds=settings.SESSION_EXPIRE_HOURS * 3600)
