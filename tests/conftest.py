import os
import tempfile

# 설정 객체가 import 시점에 만들어지므로 먼저 환경 변수를 지정한다
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="coursework-uploads-")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["SESSION_BACKEND"] = "memory"

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from coursework import models
from coursework.database import Base, enable_sqlite_savepoints
from tests.fakes import (
    FakeActivitySubmissionStore,
    FakeDirectory,
    FakeQuestionSubmissionStore,
    FakeStorage,
)
from coursework.services.submission.activity_submission_service import (
    ActivitySubmissionService,
    AttachmentPolicy,
)
from coursework.services.submission.question_submission_service import QuestionSubmissionService


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def submission_store(directory):
    return FakeActivitySubmissionStore(directory)


@pytest.fixture
def question_submission_store(directory):
    return FakeQuestionSubmissionStore(directory)


@pytest.fixture
def policy():
    return AttachmentPolicy(
        allowed_content_types=frozenset({"image/png", "image/jpeg", "application/pdf"}),
        max_size_bytes=10 * 1024 * 1024
    )


@pytest.fixture
def activity_service(submission_store, question_submission_store, directory, storage, policy):
    return ActivitySubmissionService(
        submissions=submission_store,
        question_submissions=question_submission_store,
        directory=directory,
        storage=storage,
        policy=policy
    )


@pytest.fixture
def question_service(question_submission_store, directory, activity_service):
    return QuestionSubmissionService(
        question_submissions=question_submission_store,
        directory=directory,
        activity_submissions=activity_service
    )


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_engine):
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db):
    """그룹 하나, 활동 하나, 문제 두 개(하나는 활동 항목)와 사용자들"""
    admin = models.User(name="Admin", email="admin@example.com", role=models.UserRole.ADMIN)
    admin.set_password("admin-pass")
    owner = models.User(name="Owner", email="owner@example.com")
    owner.set_password("owner-pass")
    supervisor = models.User(name="Supervisor", email="supervisor@example.com")
    supervisor.set_password("supervisor-pass")
    outsider = models.User(name="Outsider", email="outsider@example.com")
    outsider.set_password("outsider-pass")
    db.add_all([admin, owner, supervisor, outsider])
    await db.flush()

    group = models.Group(name="Algebra")
    db.add(group)
    await db.flush()

    db.add_all([
        models.GroupMember(
            group_id=group.id, user_id=owner.id, role=models.MemberRole.MEMBER, accepted_by_id=supervisor.id
        ),
        models.GroupMember(
            group_id=group.id, user_id=supervisor.id, role=models.MemberRole.SUPERVISOR, accepted_by_id=supervisor.id
        ),
    ])

    activity = models.Activity(group_id=group.id, title="Week 1")
    db.add(activity)

    closed = models.Question(type=models.QuestionType.CLOSED_ENDED, statement="What is 2 + 2?")
    open_ended = models.Question(type=models.QuestionType.OPEN_ENDED, statement="Explain the distributive law")
    db.add_all([closed, open_ended])
    await db.flush()

    right = models.QuestionOption(question_id=closed.id, text="4", is_correct=True, original_order=0)
    wrong = models.QuestionOption(question_id=closed.id, text="5", is_correct=False, original_order=1)
    db.add_all([right, wrong])
    db.add(models.ActivityItem(activity_id=activity.id, order_index=0, title="Sum", question_id=closed.id))
    await db.commit()

    return {
        "admin": admin,
        "owner": owner,
        "supervisor": supervisor,
        "outsider": outsider,
        "group": group,
        "activity": activity,
        "closed": closed,
        "open": open_ended,
        "right": right,
        "wrong": wrong,
    }
