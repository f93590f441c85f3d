"""초기 데이터 시드 스크립트 — 초기 회원 생성.

Seed script — Creates the initial member "userA".
The application lifespan runs the same seed on startup; this module also
works as a one-off command for bootstrapping a database by hand.

Usage:
    python -m app.seed

Creates:
    - 회원 1명: "userA" (1 member)
"""

import asyncio
import logging

from app.database import async_session, engine, Base
from app.models import Member, Team  # noqa: F401 — register all models with metadata
from app.services.member_service import member_service

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    """ORM 메타데이터로 테이블을 생성합니다.

    Create all tables from ORM metadata if they do not exist yet.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed() -> bool:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with the initial member.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).

    Returns:
        bool: 새로 생성했으면 True (True when the member was inserted)
    """
    async with async_session() as db:
        created: bool = await member_service.seed_members(db)
        await db.commit()

    if created:
        logger.info("Seeded member userA")
    else:
        logger.info("Already seeded. Skipping.")
    return created


async def main() -> None:
    await create_schema()
    await seed()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
