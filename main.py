from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import uvicorn
from dotenv import load_dotenv
import logging
from contextlib import asynccontextmanager
from coursework.database import init_db
from coursework.routers import (
    activity_submission_router,
    question_submission_router,
    auth_router
)
from coursework.core.config import settings
from coursework.core.errors import AppError, invalid_body
from coursework.dependencies import init_app, shutdown_services

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# .env 파일 로드
load_dotenv()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 시 실행되는 이벤트 핸들러"""
    try:
        await init_db()
        await init_app(app)
        logger.info("Application startup completed")
        yield
    finally:
        await shutdown_services()
        logger.info("Application shutdown")

# FastAPI 앱 설정
app = FastAPI(
    title="Coursework API",
    description="Activity submission and review API",
    version="1.0.0",
    lifespan=lifespan
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 개발 환경에서는 모든 origin 허용
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 예외 처리기
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = invalid_body()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    error = AppError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

# 라우터 초기화 함수 정의
def init_routers(app: FastAPI):
    """라우터 초기화"""
    app.include_router(auth_router, prefix="/api")
    app.include_router(activity_submission_router, prefix="/api")
    app.include_router(question_submission_router, prefix="/api")

init_routers(app)

# 로컬 저장소 파일 제공
if settings.STORAGE_BACKEND == "local":
    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/files", StaticFiles(directory=str(settings.UPLOAD_DIR)), name="files")

# 헬스체크 엔드포인트
@app.get("/health")
async def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        reload_dirs=["coursework"]
    )
