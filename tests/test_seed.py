"""초기 데이터 시드 테스트.

Seed tests — the initial member is inserted once, both through the service
and through the application lifespan.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import app.seed as seed_module
from app.config import settings
from app.main import app, lifespan
from app.repositories.member_repository import member_repository
from app.services.member_service import SEED_USERNAME, member_service


class TestSeedMembers:
    """서비스 시드 테스트."""

    async def test_seed_creates_user_a(self, db: AsyncSession):
        """빈 DB에 userA 생성."""
        assert await member_service.seed_members(db) is True

        members = await member_repository.find_by_username(db, SEED_USERNAME)
        assert len(members) == 1
        assert members[0].username == "userA"

    async def test_seed_is_idempotent(self, db: AsyncSession):
        """두 번 실행해도 userA는 하나."""
        await member_service.seed_members(db)

        assert await member_service.seed_members(db) is False
        assert await member_repository.count(db) == 1


class TestStartupSeed:
    """애플리케이션 시작 시드 테스트."""

    @pytest.fixture(autouse=True)
    def bind_seed_to_test_db(
        self,
        monkeypatch: pytest.MonkeyPatch,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        monkeypatch.setattr(seed_module, "engine", engine)
        monkeypatch.setattr(seed_module, "async_session", session_factory)

    async def test_seed_commits(self, session_factory: async_sessionmaker[AsyncSession]):
        """시드 결과는 커밋되어 새 세션에서 보임."""
        assert await seed_module.seed() is True
        assert await seed_module.seed() is False

        async with session_factory() as session:
            assert await member_repository.count(session) == 1

    async def test_lifespan_seeds_once(
        self,
        monkeypatch: pytest.MonkeyPatch,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        """시작을 두 번 해도 userA는 하나."""
        monkeypatch.setattr(settings, "SEED_ON_STARTUP", True)
        monkeypatch.setattr(settings, "CREATE_SCHEMA_ON_STARTUP", True)

        async with lifespan(app):
            pass
        async with lifespan(app):
            pass

        async with session_factory() as session:
            members = await member_repository.find_by_username(session, SEED_USERNAME)
            assert len(members) == 1

    async def test_lifespan_seed_disabled(
        self,
        monkeypatch: pytest.MonkeyPatch,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        """시드 비활성화 시 회원 없음."""
        monkeypatch.setattr(settings, "SEED_ON_STARTUP", False)

        async with lifespan(app):
            pass

        async with session_factory() as session:
            assert await member_repository.count(session) == 0
