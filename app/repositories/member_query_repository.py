"""회원 조회 전용 레포지토리.

Member query repository — a stand-alone query component.
Not every query needs to hang off ``MemberRepository``; a plain class like
this one can own screen- or report-specific queries on its own.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member


class MemberQueryRepository:
    """회원 조회용 독립 레포지토리.

    Independent repository for member read queries.
    """

    async def find_all_members(self, db: AsyncSession) -> list[Member]:
        """명시적 쿼리로 모든 회원을 조회합니다.

        Retrieve every member with an explicit select, ordered by id.
        """
        query: Select = select(Member).order_by(Member.id)
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
member_query_repository: MemberQueryRepository = MemberQueryRepository()
