"""회원 관련 Pydantic 응답 스키마 정의.

Member-related Pydantic response schema definitions.
DTOs keep ORM entities from crossing the API boundary.
"""

from pydantic import BaseModel, ConfigDict


class MemberDto(BaseModel):
    """회원 조회 전용 프로젝션.

    Read-only member projection; never persisted.

    Attributes:
        id: 회원 ID (Member id)
        username: 회원 이름 (Username)
        team_name: 소속 팀 이름, 팀이 없으면 None (Team name, None without a team)
    """

    model_config = ConfigDict(frozen=True)

    id: int  # 회원 ID (Member id)
    username: str | None  # 회원 이름 (Username)
    team_name: str | None = None  # 소속 팀 이름 (Joined team name, nullable)
