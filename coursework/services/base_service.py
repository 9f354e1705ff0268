from typing import Optional
from coursework.core.config import Settings, settings as default_settings
from coursework.services.file.file_service import ObjectStorage


class BaseService:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    @staticmethod
    def _clean_text(value: Optional[str]) -> Optional[str]:
        """앞뒤 공백 제거. 빈 문자열은 None 으로 취급"""
        if value is None:
            return None
        value = value.strip()
        return value or None

    @staticmethod
    async def _delete_object_safely(storage: ObjectStorage, key: Optional[str]) -> None:
        """저장소 객체 삭제. 실패해도 호출자에게 전파하지 않는다"""
        if not key:
            return
        try:
            await storage.delete(key)
        except Exception:
            pass
