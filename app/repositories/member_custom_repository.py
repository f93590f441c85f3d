"""회원 사용자 정의 레포지토리 — 직접 작성한 쿼리 구현.

Member custom repository — hand-written query implementations that
``MemberRepository`` exposes next to its declared finders.
Anything too specific for a finder (raw SQL, vendor features, multi-step
reads) lives here and is reached through ``MemberRepository``.
"""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member


class MemberCustomRepository:
    """회원 사용자 정의 쿼리 구현체.

    Custom query implementation for members.
    """

    async def find_member_custom(self, db: AsyncSession) -> list[Member]:
        """모든 회원을 직접 작성한 SQL로 조회합니다.

        Return every member using a hand-written SQL statement mapped back
        onto the ``Member`` entity.
        """
        query = (
            text("SELECT id, username, age, team_id FROM members ORDER BY id")
            .columns(Member.id, Member.username, Member.age, Member.team_id)
        )
        result = await db.execute(
            select(Member).from_statement(query)
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
member_custom_repository: MemberCustomRepository = MemberCustomRepository()
