from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import event
from sqlalchemy.orm import declarative_base
from coursework.core.config import settings
import logging
from typing import AsyncGenerator

logger = logging.getLogger(__name__)

def _engine_options(url: str) -> dict:
    # sqlite 드라이버는 커넥션 풀 옵션을 받지 않는다
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "pool_size": 30,
        "max_overflow": 30,
        "pool_timeout": 30,
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "echo": False,
    }

def enable_sqlite_savepoints(async_engine):
    """pysqlite 의 암묵적 트랜잭션 처리를 끄고 BEGIN 을 직접 보낸다

    이렇게 해야 SAVEPOINT (begin_nested) 가 바깥 트랜잭션 안에서 동작한다.
    """
    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return async_engine

engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
if settings.DATABASE_URL.startswith("sqlite"):
    enable_sqlite_savepoints(engine)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

Base = declarative_base()

async def init_db():
    """데이터베이스 초기화"""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("데이터베이스 테이블 생성 완료")
    except Exception as e:
        logger.error(f"데이터베이스 초기화 중 오류: {str(e)}")
        raise

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """비동기 세션 생성"""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            # 커밋되지 않은 변경은 버린다
            await session.rollback()
            raise

# FastAPI dependency
get_db = get_session
