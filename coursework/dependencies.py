import logging
from typing import Optional
from fastapi import FastAPI, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from coursework.core.config import settings
from coursework.database import get_db
from coursework.services.file.file_service import ObjectStorage, build_storage
from coursework.services.group.membership_repository import MembershipRepository
from coursework.services.submission.activity_submission_service import (
    ActivitySubmissionService,
    AttachmentPolicy,
)
from coursework.services.submission.question_submission_repository import QuestionSubmissionRepository
from coursework.services.submission.question_submission_service import QuestionSubmissionService
from coursework.services.submission.submission_repository import ActivitySubmissionRepository
from coursework.utils.session import build_session_store

logger = logging.getLogger(__name__)

class Services:
    def __init__(self):
        self.session_store = None
        self.storage: Optional[ObjectStorage] = None
        self.attachment_policy: Optional[AttachmentPolicy] = None

services = Services()

async def init_services():
    """서비스 초기화"""
    try:
        logger.info(f"Initializing session store ({settings.SESSION_BACKEND})...")
        services.session_store = build_session_store(settings)

        logger.info(f"Initializing storage ({settings.STORAGE_BACKEND})...")
        services.storage = build_storage(settings)

        services.attachment_policy = AttachmentPolicy.from_settings(settings)
        logger.info("Services initialized successfully")

    except Exception as e:
        logger.error(f"Error initializing services: {e}")
        raise

async def shutdown_services():
    if services.session_store is not None:
        await services.session_store.cleanup()

async def get_services() -> Services:
    """서비스 인스턴스 반환"""
    return services

def get_session_store(services: Services = Depends(get_services)):
    if services.session_store is None:
        raise RuntimeError("Services not initialized")
    return services.session_store

def get_storage(services: Services = Depends(get_services)) -> ObjectStorage:
    if services.storage is None:
        raise RuntimeError("Services not initialized")
    return services.storage

def get_activity_submission_service(
    db: AsyncSession = Depends(get_db),
    services: Services = Depends(get_services),
    storage: ObjectStorage = Depends(get_storage)
) -> ActivitySubmissionService:
    return ActivitySubmissionService(
        submissions=ActivitySubmissionRepository(db),
        question_submissions=QuestionSubmissionRepository(db),
        directory=MembershipRepository(db),
        storage=storage,
        policy=services.attachment_policy
    )

def get_question_submission_service(
    db: AsyncSession = Depends(get_db),
    activity_submissions: ActivitySubmissionService = Depends(get_activity_submission_service)
) -> QuestionSubmissionService:
    return QuestionSubmissionService(
        question_submissions=QuestionSubmissionRepository(db),
        directory=MembershipRepository(db),
        activity_submissions=activity_submissions
    )

async def init_app(app: FastAPI):
    """앱 초기화"""
    try:
        await init_services()
    except Exception as e:
        logger.error(f"Service initialization failed: {str(e)}")
        raise
