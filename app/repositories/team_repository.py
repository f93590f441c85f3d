"""팀 레포지토리 — 팀 CRUD.

Team Repository — CRUD for teams; everything comes from BaseRepository.
"""

from app.models.team import Team
from app.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the teams table.
    """

    def __init__(self) -> None:
        super().__init__(Team)


# 싱글턴 인스턴스 — Singleton instance
team_repository: TeamRepository = TeamRepository()
