"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class.
PostgreSQL (asyncpg) is the default backend; SQLite (aiosqlite) is supported
for local runs and tests, with foreign key enforcement switched on.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite 연결마다 외래 키 제약을 활성화합니다.

    SQLite ships with foreign keys disabled; turn them on per connection so a
    member can never reference a team that does not exist.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False, **engine_options: Any) -> AsyncEngine:
    """백엔드별 옵션을 적용하여 비동기 엔진을 생성합니다.

    Create an async engine with backend-specific options.

    Args:
        database_url: SQLAlchemy 연결 URL (SQLAlchemy connection URL)
        echo: SQL 로그 출력 여부 (Whether to echo SQL statements)
        engine_options: create_async_engine 추가 옵션 (Extra engine options, e.g. poolclass)

    Returns:
        AsyncEngine: 구성된 비동기 엔진 (Configured async engine)
    """
    backend: str = make_url(database_url).get_backend_name()

    if backend == "sqlite":
        eng: AsyncEngine = create_async_engine(database_url, echo=echo, **engine_options)
        event.listen(eng.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return eng

    # pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
    # Supavisor(트랜잭션 모드 풀러)에서 prepared statement 비활성화
    # Disable prepared statement caches for Supavisor transaction-mode pooling
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args={"statement_cache_size": 0},
        **engine_options,
    )


# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    All models inherit from this class to register with the metadata.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session.
    One session is one unit of work; it is closed after the request completes.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
