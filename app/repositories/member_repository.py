"""회원 레포지토리 — 회원 CRUD 및 조회 쿼리.

Member Repository — CRUD plus the member finder queries.
Extends BaseRepository with Member-specific database operations.

Each finder is named after its predicate (``find_by_username_and_age_greater_than``
filters on username equality and a strict age bound). The single-result
finders deliberately differ in how they report "no row" and "too many rows":

    - ``find_member_by_username``: None / IncorrectResultSizeError
    - ``find_list_by_username``: [] / every row
    - ``find_optional_by_username``: OptionalResult.empty() / IncorrectResultSizeError
"""

import logging
from typing import Iterable

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.models.member import Member
from app.models.team import Team
from app.repositories.base import BaseRepository
from app.repositories.member_custom_repository import (
    MemberCustomRepository,
    member_custom_repository,
)
from app.schemas.member import MemberDto
from app.utils.optional import OptionalResult
from app.utils.pagination import Page, PageRequest, Slice, paginate, paginate_slice

logger = logging.getLogger(__name__)


class MemberRepository(BaseRepository[Member]):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the members table.
    Hand-written queries are delegated to a ``MemberCustomRepository``.
    """

    def __init__(self, custom: MemberCustomRepository = member_custom_repository) -> None:
        """MemberRepository를 초기화합니다.

        Initialize the MemberRepository with the Member model.

        Args:
            custom: 사용자 정의 쿼리 구현체 (Custom query implementation)
        """
        super().__init__(Member)
        self.custom: MemberCustomRepository = custom

    async def find_by_username_and_age_greater_than(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        """이름이 같고 나이가 기준보다 큰 회원을 조회합니다.

        Retrieve members with the given username and ``age`` strictly greater
        than the threshold, in insertion (id) order.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 회원 이름 (Username to match exactly)
            age: 나이 하한, 미포함 (Exclusive lower age bound)

        Returns:
            list[Member]: 조건에 맞는 회원 목록 (Matching members)
        """
        query: Select = (
            select(Member)
            .where(Member.username == username, Member.age > age)
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """이름이 일치하는 모든 회원을 조회합니다.

        Retrieve every member whose username matches exactly.
        """
        query: Select = select(Member).where(Member.username == username).order_by(Member.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_member(self, db: AsyncSession, username: str, age: int) -> list[Member]:
        """이름과 나이가 모두 일치하는 회원을 조회합니다.

        Parameterized lookup matching both username and age exactly.
        """
        query: Select = (
            select(Member)
            .where(Member.username == username)
            .where(Member.age == age)
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_username_list(self, db: AsyncSession) -> list[str]:
        """모든 회원의 이름만 조회합니다.

        Retrieve only the username column of every member.
        """
        query: Select = select(Member.username).order_by(Member.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_member_dto(self, db: AsyncSession) -> list[MemberDto]:
        """팀과 내부 조인하여 회원 DTO 목록을 조회합니다.

        Project members joined with their team into MemberDto rows.
        Inner join: members without a team are not returned.
        """
        query: Select = (
            select(Member.id, Member.username, Team.name)
            .join(Member.team)
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return [
            MemberDto(id=member_id, username=username, team_name=team_name)
            for member_id, username, team_name in result.all()
        ]

    async def find_by_names(self, db: AsyncSession, names: Iterable[str]) -> list[Member]:
        """이름 목록에 포함되는 회원을 조회합니다.

        Retrieve members whose username is in ``names``, in insertion order.
        An empty collection matches nothing and skips the query.
        """
        name_list: list[str] = list(names)
        if not name_list:
            return []
        query: Select = (
            select(Member)
            .where(Member.username.in_(name_list))
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_member_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """이름으로 단건 조회합니다.

        Single-result lookup by username.

        Returns:
            Member | None: 일치하는 회원, 없으면 None (The member, or None)

        Raises:
            IncorrectResultSizeError: 두 명 이상 일치할 때 (More than one match)
        """
        query: Select = select(Member).where(Member.username == username).order_by(Member.id)
        return await self._single_result(db, query)

    async def find_list_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """이름으로 목록 조회합니다. 결과가 없으면 빈 리스트를 반환합니다.

        List lookup by username; empty list, never None, when nothing matches.
        """
        return await self.find_by_username(db, username)

    async def find_optional_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> OptionalResult[Member]:
        """이름으로 단건 조회하여 OptionalResult로 반환합니다.

        Single-result lookup by username wrapped in an OptionalResult.

        Raises:
            IncorrectResultSizeError: 두 명 이상 일치할 때 (More than one match)
        """
        query: Select = select(Member).where(Member.username == username).order_by(Member.id)
        return OptionalResult.of_nullable(await self._single_result(db, query))

    async def find_by_age(
        self,
        db: AsyncSession,
        age: int,
        page_request: PageRequest,
    ) -> Page[Member]:
        """나이가 일치하는 회원을 페이지 단위로 조회합니다.

        Retrieve one page of members with the given age, sorted per the
        page request before slicing, with the total count.
        """
        query: Select = select(Member).where(Member.age == age)
        return await paginate(db, query, page_request, Member)

    async def find_slice_by_age(
        self,
        db: AsyncSession,
        age: int,
        page_request: PageRequest,
    ) -> Slice[Member]:
        """나이가 일치하는 회원을 카운트 쿼리 없이 조각 단위로 조회합니다.

        Like ``find_by_age`` but without a COUNT query; only ``has_next`` is known.
        """
        query: Select = select(Member).where(Member.age == age)
        return await paginate_slice(db, query, page_request, Member)

    async def find_all_with_team(
        self,
        db: AsyncSession,
        page_request: PageRequest,
    ) -> Page[Member]:
        """팀을 함께 로드하여 전체 회원을 페이지 단위로 조회합니다.

        Retrieve one page of all members with their team loaded eagerly.
        """
        query: Select = select(Member).options(selectinload(Member.team))
        return await paginate(db, query, page_request, Member)

    async def bulk_age_plus(
        self,
        db: AsyncSession,
        age: int,
        clear_automatically: bool = True,
    ) -> int:
        """기준 나이 이상인 회원의 나이를 한 번의 UPDATE로 1 증가시킵니다.

        Increment ``age`` by one for every member with ``age >= age`` in a
        single UPDATE statement and return the number of rows affected.

        The statement bypasses the session's identity map: instances loaded
        before the call keep their old ``age``. With ``clear_automatically``
        the session is emptied afterwards so later reads load fresh rows.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            age: 나이 하한, 포함 (Inclusive age threshold)
            clear_automatically: 실행 후 세션 비우기 여부 (Empty the session afterwards)

        Returns:
            int: 변경된 행 수 (Number of rows updated)
        """
        stmt = (
            update(Member)
            .where(Member.age >= age)
            .values(age=Member.age + 1)
            .execution_options(synchronize_session=False)
        )
        # 세션의 미반영 변경을 먼저 DB에 반영 — Flush pending changes before the UPDATE
        await db.flush()
        result = await db.execute(stmt)
        if clear_automatically:
            db.expunge_all()
        logger.info("Bulk age increment for age >= %s updated %s rows", age, result.rowcount)
        return result.rowcount

    async def find_member_custom(self, db: AsyncSession) -> list[Member]:
        """사용자 정의 구현으로 모든 회원을 조회합니다.

        Retrieve every member through the hand-written custom implementation.
        """
        return await self.custom.find_member_custom(db)

    async def find_member_fetch_join(self, db: AsyncSession) -> list[Member]:
        """회원과 팀을 한 번의 조인 쿼리로 함께 조회합니다.

        Retrieve every member with its team loaded in the same statement.
        """
        query: Select = (
            select(Member)
            .options(joinedload(Member.team))
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
