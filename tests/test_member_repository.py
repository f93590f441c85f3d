"""회원 레포지토리 테스트.

Member repository tests — CRUD, finders, single-result contracts, paging,
bulk update, custom query and explicit team loading.
"""

import pytest
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member
from app.models.team import Team
from app.repositories.member_query_repository import member_query_repository
from app.repositories.member_repository import member_repository
from app.repositories.team_repository import team_repository
from app.schemas.member import MemberDto
from app.utils.exceptions import ConstraintViolationError, IncorrectResultSizeError
from app.utils.pagination import Direction, PageRequest, Sort
from tests.conftest import add_members


class TestMemberCrud:
    """회원 CRUD 테스트."""

    async def test_save_and_find_by_id(self, db: AsyncSession):
        """저장 후 ID로 조회하면 같은 인스턴스."""
        member = Member("memberA")
        saved = await member_repository.save(db, member)

        found = await member_repository.get_by_id(db, saved.id)

        assert saved is member
        assert found is not None
        assert found.id == member.id
        assert found.username == member.username
        assert found is member

    async def test_find_by_id_optional(self, db: AsyncSession):
        """ID 조회 OptionalResult — 있음/없음."""
        member = await member_repository.save(db, Member("memberA"))

        assert (await member_repository.find_by_id(db, member.id)).get() is member
        assert (await member_repository.find_by_id(db, 9999)).is_empty()

    async def test_crud(self, db: AsyncSession):
        """저장, 단건/전체 조회, 카운트, 삭제."""
        member1 = await member_repository.save(db, Member("member1"))
        member2 = await member_repository.save(db, Member("member2"))

        assert await member_repository.get_by_id(db, member1.id) is member1
        assert await member_repository.get_by_id(db, member2.id) is member2

        all_members = await member_repository.find_all(db)
        assert len(all_members) == 2
        assert await member_repository.count(db) == 2

        await member_repository.delete(db, member1)
        await member_repository.delete(db, member2)
        assert await member_repository.count(db) == 0

    async def test_id_assigned_once(self, db: AsyncSession):
        """ID는 저장 시 한 번 할당되고 변경되지 않음."""
        member = await member_repository.save(db, Member("member1", 10))
        original_id = member.id

        member.age = 11
        await member_repository.save(db, member)

        assert member.id == original_id

    async def test_save_with_missing_team_violates_constraint(self, db: AsyncSession):
        """존재하지 않는 팀 참조 시 ConstraintViolationError."""
        member = Member("orphan", 10)
        member.team_id = 9999

        with pytest.raises(ConstraintViolationError):
            await member_repository.save(db, member)


class TestDerivedFinders:
    """이름 규칙 조회 테스트."""

    async def test_find_by_username_and_age_greater_than(self, db: AsyncSession):
        """AAA(10), AAA(20) 중 나이 15 초과는 20 하나."""
        await add_members(db, Member("AAA", 10), Member("AAA", 20))

        members = await member_repository.find_by_username_and_age_greater_than(db, "AAA", 15)

        assert len(members) == 1
        assert members[0].username == "AAA"
        assert members[0].age == 20

    async def test_age_threshold_is_exclusive(self, db: AsyncSession):
        """나이 기준값과 같은 회원은 제외."""
        await add_members(db, Member("AAA", 15))

        assert await member_repository.find_by_username_and_age_greater_than(db, "AAA", 15) == []

    async def test_find_by_username_unique(self, db: AsyncSession):
        """고유한 이름이면 정확히 하나만 반환."""
        member1, member2, member3 = await add_members(
            db, Member("alpha", 10), Member("beta", 20), Member("gamma", 30)
        )

        for member in (member1, member2, member3):
            result = await member_repository.find_by_username(db, member.username)
            assert result == [member]

    async def test_find_by_username_multiple_rows(self, db: AsyncSession):
        """같은 이름이 여럿이면 삽입 순서대로 모두 반환."""
        member1, member2 = await add_members(db, Member("AAA", 10), Member("AAA", 20))

        members = await member_repository.find_by_username(db, "AAA")

        assert members[0] is member1
        assert members == [member1, member2]

    async def test_find_member(self, db: AsyncSession):
        """이름과 나이가 모두 일치하는 회원."""
        member1, _ = await add_members(db, Member("AAA", 10), Member("AAA", 20))

        members = await member_repository.find_member(db, "AAA", 10)

        assert members == [member1]

    async def test_find_username_list(self, db: AsyncSession):
        """이름 컬럼만 평탄한 리스트로 반환."""
        await add_members(db, Member("AAA", 10), Member("BBB", 20))

        usernames = await member_repository.find_username_list(db)

        assert usernames == ["AAA", "BBB"]

    async def test_find_by_names(self, db: AsyncSession):
        """이름 목록 조회 — 삽입 순서 유지."""
        await add_members(db, Member("AAA", 10), Member("BBB", 20), Member("CCC", 30))

        members = await member_repository.find_by_names(db, ["BBB", "AAA"])

        assert [m.username for m in members] == ["AAA", "BBB"]

    async def test_find_by_names_is_stable(self, db: AsyncSession):
        """같은 데이터에 대해 반복 호출해도 순서가 같음."""
        await add_members(db, Member("AAA", 10), Member("BBB", 20))

        first = await member_repository.find_by_names(db, ("AAA", "BBB"))
        second = await member_repository.find_by_names(db, ("BBB", "AAA"))

        assert first == second

    async def test_find_by_names_empty(self, db: AsyncSession):
        """빈 이름 목록은 빈 리스트."""
        await add_members(db, Member("AAA", 10))

        assert await member_repository.find_by_names(db, []) == []


class TestMemberDto:
    """DTO 프로젝션 테스트."""

    async def test_find_member_dto(self, db: AsyncSession, team_a: Team):
        """저장 후 팀을 지정해도 DTO에 팀 이름이 채워짐."""
        member1 = await member_repository.save(db, Member("AAA", 10))
        member1.change_team(team_a)

        dtos = await member_repository.find_member_dto(db)

        assert dtos == [MemberDto(id=member1.id, username="AAA", team_name="teamA")]
        assert dtos[0].team_name == "teamA"

    async def test_member_without_team_is_excluded(self, db: AsyncSession, team_a: Team):
        """팀이 없는 회원은 DTO 목록에서 제외."""
        await add_members(db, Member("withTeam", 10, team_a), Member("noTeam", 20))

        dtos = await member_repository.find_member_dto(db)

        assert [dto.username for dto in dtos] == ["withTeam"]

    async def test_no_teams_no_dtos(self, db: AsyncSession):
        """팀이 있는 회원이 없으면 빈 리스트."""
        await add_members(db, Member("noTeam", 20))

        assert await member_repository.find_member_dto(db) == []


class TestReturnTypes:
    """단건/목록/OptionalResult 반환 계약 테스트."""

    @pytest.fixture
    async def members(self, db: AsyncSession) -> list[Member]:
        return await add_members(db, Member("AAA", 10), Member("BBB", 20), Member("BBB", 30))

    async def test_single_result_missing_is_none(self, db: AsyncSession, members):
        """단건 조회 결과 없음 → None."""
        assert await member_repository.find_member_by_username(db, "AAAB") is None

    async def test_list_result_missing_is_empty(self, db: AsyncSession, members):
        """목록 조회 결과 없음 → 빈 리스트 (None 아님)."""
        result = await member_repository.find_list_by_username(db, "AAAB")

        assert result is not None
        assert result == []

    async def test_optional_result_missing_is_empty(self, db: AsyncSession, members):
        """OptionalResult 조회 결과 없음 → empty."""
        result = await member_repository.find_optional_by_username(db, "AAAB")

        assert result.is_empty()
        assert not result.is_present()
        assert result.or_else(None) is None

    async def test_single_result_found(self, db: AsyncSession, members):
        """단건 조회 성공."""
        assert await member_repository.find_member_by_username(db, "AAA") is members[0]
        assert (await member_repository.find_optional_by_username(db, "AAA")).get() is members[0]

    async def test_single_result_ambiguous(self, db: AsyncSession, members):
        """단건 조회에 두 건 이상 → IncorrectResultSizeError."""
        with pytest.raises(IncorrectResultSizeError) as exc_info:
            await member_repository.find_member_by_username(db, "BBB")

        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 2

    async def test_optional_result_ambiguous(self, db: AsyncSession, members):
        """OptionalResult 조회에 두 건 이상 → IncorrectResultSizeError."""
        with pytest.raises(IncorrectResultSizeError):
            await member_repository.find_optional_by_username(db, "BBB")

    async def test_single_result_many_matches(self, db: AsyncSession, members):
        """세 건 이상 일치해도 두 건만 읽고 예외."""
        await add_members(db, Member("BBB", 40))

        with pytest.raises(IncorrectResultSizeError) as exc_info:
            await member_repository.find_member_by_username(db, "BBB")

        assert exc_info.value.actual == 2
        assert len(await member_repository.find_list_by_username(db, "BBB")) == 3

    async def test_list_result_multiple(self, db: AsyncSession, members):
        """목록 조회는 여러 건을 그대로 반환."""
        result = await member_repository.find_list_by_username(db, "BBB")

        assert [m.age for m in result] == [20, 30]


class TestPaging:
    """페이징 테스트."""

    @pytest.fixture
    async def members(self, db: AsyncSession) -> list[Member]:
        return await add_members(db, *(Member(f"member{i}", 10) for i in range(1, 6)))

    async def test_find_by_age_first_page(self, db: AsyncSession, members):
        """5명, 0페이지, 크기 3, 이름 내림차순."""
        page_request = PageRequest.of(0, 3, Sort.by("username", direction=Direction.DESC))

        page = await member_repository.find_by_age(db, 10, page_request)

        assert len(page.content) == 3
        assert page.total_elements == 5
        assert page.number == 0
        assert page.total_pages == 2
        assert page.is_first()
        assert page.has_next
        assert [m.username for m in page.content] == ["member5", "member4", "member3"]

    async def test_find_by_age_last_page(self, db: AsyncSession, members):
        """마지막 페이지 — 남은 2명, 다음 페이지 없음."""
        page_request = PageRequest.of(1, 3, Sort.by("username", direction=Direction.DESC))

        page = await member_repository.find_by_age(db, 10, page_request)

        assert [m.username for m in page.content] == ["member2", "member1"]
        assert page.total_elements == 5
        assert page.last
        assert not page.has_next
        assert page.has_previous

    async def test_find_by_age_filters_before_paging(self, db: AsyncSession, members):
        """다른 나이의 회원은 전체 개수에 포함되지 않음."""
        await add_members(db, Member("other", 99))

        page = await member_repository.find_by_age(db, 10, PageRequest.of(0, 10))

        assert page.total_elements == 5
        assert page.total_pages == 1

    async def test_page_map_to_dto(self, db: AsyncSession, members):
        """페이지를 DTO로 변환해도 메타데이터 유지."""
        page = await member_repository.find_by_age(db, 10, PageRequest.of(0, 3, Sort.by("username")))

        dto_page = page.map(lambda m: MemberDto(id=m.id, username=m.username))

        assert [d.username for d in dto_page.content] == ["member1", "member2", "member3"]
        assert dto_page.total_elements == page.total_elements
        assert dto_page.total_pages == page.total_pages

    async def test_find_slice_by_age(self, db: AsyncSession, members):
        """카운트 없이 다음 조각 존재 여부만 판단."""
        page_request = PageRequest.of(0, 3, Sort.by("username", direction=Direction.DESC))

        first = await member_repository.find_slice_by_age(db, 10, page_request)
        second = await member_repository.find_slice_by_age(db, 10, page_request.next())

        assert len(first.content) == 3
        assert first.has_next
        assert [m.username for m in second.content] == ["member2", "member1"]
        assert not second.has_next


class TestBulkUpdate:
    """벌크 업데이트 테스트."""

    @pytest.fixture
    async def members(self, db: AsyncSession) -> list[Member]:
        return await add_members(
            db,
            Member("member1", 10),
            Member("member2", 19),
            Member("member3", 20),
            Member("member4", 21),
            Member("member5", 40),
        )

    async def test_bulk_age_plus(self, db: AsyncSession, members):
        """나이 20 이상 3명이 1씩 증가."""
        result_count = await member_repository.bulk_age_plus(db, 20)

        assert result_count == 3
        reloaded = await member_repository.find_all(db)
        assert [m.age for m in reloaded] == [10, 19, 21, 22, 41]

    async def test_bulk_update_leaves_loaded_instances_stale(self, db: AsyncSession, members):
        """벌크 업데이트 전에 로드한 인스턴스는 갱신되지 않음."""
        member3 = members[2]

        await member_repository.bulk_age_plus(db, 20)

        assert member3.age == 20
        reloaded = await member_repository.get_by_id(db, member3.id)
        assert reloaded is not member3
        assert reloaded.age == 21

    async def test_bulk_update_without_clearing(self, db: AsyncSession, members):
        """세션을 비우지 않으면 재조회해도 캐시된 값이 보임."""
        member3 = members[2]

        await member_repository.bulk_age_plus(db, 20, clear_automatically=False)

        same = await member_repository.get_by_id(db, member3.id)
        assert same is member3
        assert same.age == 20
        await db.refresh(member3)
        assert member3.age == 21

    async def test_bulk_update_keeps_unflushed_members(self, db: AsyncSession, members):
        """자동 flush가 꺼져 있어도 추가 중인 회원이 저장되고 갱신됨."""
        with db.no_autoflush:
            db.add(Member("pending", 25))
            result_count = await member_repository.bulk_age_plus(db, 20)

        assert result_count == 4
        pending = await member_repository.find_member_by_username(db, "pending")
        assert pending is not None
        assert pending.age == 26
        assert "pending" in await member_repository.find_username_list(db)

    async def test_bulk_update_no_match(self, db: AsyncSession, members):
        """조건에 맞는 회원이 없으면 0."""
        assert await member_repository.bulk_age_plus(db, 100) == 0


class TestCustomQueries:
    """사용자 정의 쿼리 및 독립 조회 레포지토리 테스트."""

    async def test_find_member_custom(self, db: AsyncSession):
        """사용자 정의 구현으로 전체 회원 조회."""
        member1, member2 = await add_members(db, Member("AAA", 10), Member("BBB", 20))

        members = await member_repository.find_member_custom(db)

        assert members == [member1, member2]

    async def test_find_member_custom_empty(self, db: AsyncSession):
        """회원이 없으면 빈 리스트."""
        assert await member_repository.find_member_custom(db) == []

    async def test_find_all_members(self, db: AsyncSession):
        """독립 조회 레포지토리 — find_all과 같은 결과."""
        await add_members(db, Member("AAA", 10), Member("BBB", 20))

        members = await member_query_repository.find_all_members(db)

        assert members == await member_repository.find_all(db)
        assert len(members) == 2


class TestTeamLoading:
    """팀 연관 로딩 테스트."""

    @pytest.fixture
    async def members(self, db: AsyncSession, team_a: Team, team_b: Team) -> list[Member]:
        members = await add_members(db, Member("member1", 10, team_a), Member("member2", 10, team_b))
        await db.commit()
        db.expunge_all()
        return members

    async def test_fetch_join_loads_team(self, db: AsyncSession, members):
        """페치 조인으로 팀을 함께 로드."""
        loaded = await member_repository.find_member_fetch_join(db)

        assert [m.team.name for m in loaded] == ["teamA", "teamB"]

    async def test_unloaded_team_is_not_lazy_loaded(self, db: AsyncSession, members):
        """명시적으로 로드하지 않은 팀은 숨은 쿼리 대신 예외."""
        loaded = await member_repository.find_all(db)

        with pytest.raises(InvalidRequestError):
            _ = loaded[0].team

    async def test_team_is_saved_through_repository(self, db: AsyncSession):
        """팀 레포지토리 저장 및 카운트."""
        team = await team_repository.save(db, Team("teamC"))

        assert team.id is not None
        assert await team_repository.get_by_id(db, team.id) is team
        assert await team_repository.count(db) == 1
