"""회원 서비스 — 회원 조회 및 시드 비즈니스 로직.

Member Service — Business logic behind the member endpoints.
Converts repository results to API shapes and turns a missing member into a
NotFoundError so the API answers 404 instead of failing.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member
from app.repositories.member_repository import MemberRepository, member_repository
from app.schemas.member import MemberDto
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageRequest

SEED_USERNAME: str = "userA"


class MemberService:
    """회원 관련 비즈니스 로직을 처리하는 서비스.

    Service handling member business logic.
    """

    def __init__(self, repository: MemberRepository = member_repository) -> None:
        self.repository: MemberRepository = repository

    def _to_dto(self, member: Member) -> MemberDto:
        """회원 모델을 DTO로 변환합니다. 팀이 로드되어 있어야 합니다.

        Convert a Member (with its team loaded) to a MemberDto.
        """
        team_name: str | None = member.team.name if member.team is not None else None
        return MemberDto(id=member.id, username=member.username, team_name=team_name)

    async def get_member(self, db: AsyncSession, member_id: int) -> Member:
        """ID로 회원을 조회합니다.

        Retrieve a member by id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            member_id: 회원 ID (Member id)

        Returns:
            Member: 조회된 회원 (The member)

        Raises:
            NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
        """
        member: Member | None = await self.repository.get_by_id(db, member_id)
        if member is None:
            raise NotFoundError("Member not found")
        return member

    async def get_username(self, db: AsyncSession, member_id: int) -> str:
        """ID로 회원 이름을 조회합니다.

        Return the username of the member with ``member_id``.

        Raises:
            NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
        """
        member: Member = await self.get_member(db, member_id)
        return member.username or ""

    async def list_members(self, db: AsyncSession, page_request: PageRequest) -> Page[MemberDto]:
        """전체 회원을 DTO 페이지로 조회합니다.

        Return one page of all members as MemberDto, team names included.
        """
        page: Page[Member] = await self.repository.find_all_with_team(db, page_request)
        return page.map(self._to_dto)

    async def seed_members(self, db: AsyncSession) -> bool:
        """초기 회원 "userA"를 한 번만 생성합니다.

        Insert the initial member "userA" unless it already exists.

        Returns:
            bool: 새로 생성했으면 True (True when the member was created)
        """
        if await self.repository.exists(db, {"username": SEED_USERNAME}):
            return False
        await self.repository.save(db, Member(SEED_USERNAME))
        return True


# 싱글턴 인스턴스 — Singleton instance
member_service: MemberService = MemberService()
