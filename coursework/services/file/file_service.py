from abc import ABC, abstractmethod
from pathlib import Path
import aiofiles
import aiofiles.os
import logging
from coursework.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ObjectStorage(ABC):
    """첨부파일 객체 저장소"""

    @abstractmethod
    async def upload(self, key: str, content_type: str, data: bytes) -> str:
        """객체를 저장하고 조회 URL 반환"""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def public_url(self, key: str) -> str:
        ...


class LocalFileStorage(ObjectStorage):
    """UPLOAD_DIR 아래에 파일을 저장하는 로컬 저장소"""

    def __init__(self, upload_dir: Path, public_base_url: str):
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url.rstrip("/")

    def _full_path(self, key: str) -> Path:
        path = (self.upload_dir / key).resolve()
        if self.upload_dir.resolve() not in path.parents:
            raise ValueError(f"Invalid storage key: {key}")
        return path

    async def upload(self, key: str, content_type: str, data: bytes) -> str:
        """파일 저장 및 URL 반환"""
        path = self._full_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

        logger.info(f"File stored: {key} ({content_type}, {len(data)} bytes)")
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        """파일 삭제"""
        path = self._full_path(key)
        if not path.exists():
            logger.warning(f"File not found: {path}")
            return
        try:
            await aiofiles.os.remove(path)
            logger.info(f"File deleted: {path}")
        except OSError as e:
            logger.warning(f"Error deleting file {key}: {e}")
            raise

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"


def build_storage(settings: Settings = default_settings) -> ObjectStorage:
    """설정에 맞는 저장소 생성"""
    if settings.STORAGE_BACKEND == "r2":
        from coursework.services.file.r2_storage import R2Storage
        return R2Storage(
            endpoint=settings.R2_ENDPOINT,
            access_key=settings.R2_ACCESS_KEY,
            secret_key=settings.R2_SECRET_KEY,
            bucket=settings.R2_BUCKET,
            public_base_url=settings.R2_PUBLIC_URL
        )
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    return LocalFileStorage(settings.UPLOAD_DIR, settings.PUBLIC_FILES_URL)
