from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
from functools import lru_cache
from pathlib import Path

# 기본 디렉토리 설정
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # 기본 경로 설정
    BASE_DIR: Path = BASE_DIR
    UPLOAD_DIR: Path = BASE_DIR / "uploads"

    # 보안 설정
    SECRET_KEY: str = "change-me"

    # 디버그 설정
    DEBUG: bool = True

    # Redis 설정
    REDIS_URL: str = "redis://localhost:6379"
    REDIS_PREFIX: str = "coursework:"

    # 세션 설정
    SESSION_BACKEND: str = "memory"  # memory | redis
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_EXPIRE_HOURS: int = 24
    COOKIE_SECURE: bool = False

    # Database
    DATABASE_URL_OVERRIDE: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "coursework_user"
    POSTGRES_PASSWORD: str = "coursework_password"
    POSTGRES_DB: str = "coursework_db"
    POSTGRES_PORT: str = "5432"

    # 파일 저장소 설정
    STORAGE_BACKEND: str = "local"  # local | r2
    PUBLIC_FILES_URL: str = "http://localhost:8000/files"
    R2_ENDPOINT: Optional[str] = None
    R2_ACCESS_KEY: Optional[str] = None
    R2_SECRET_KEY: Optional[str] = None
    R2_BUCKET: str = "coursework"
    R2_PUBLIC_URL: str = ""

    # 제출물 첨부파일 제한
    MAX_SUBMISSION_ATTACHMENT_SIZE: int = 10 * 1024 * 1024
    ALLOWED_SUBMISSION_ATTACHMENT_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/gif",
        "application/pdf",
    ]

    # 페이지네이션
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

@lru_cache()
def get_settings():
    return Settings()

settings = get_settings()
