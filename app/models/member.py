"""회원 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.

Tables:
    - members: 회원 레코드, 선택적으로 팀에 소속 (Member records, optionally in a team)
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.team import Team


class Member(Base):
    """회원 모델.

    Member model — username/age record with an optional many-to-one team.

    Identity is the persisted row: inside one session the identity map hands
    back the same instance for the same id, so ``is`` comparison holds for a
    member saved and then fetched again.

    Attributes:
        id: 고유 식별자, flush 시 한 번만 할당 (Surrogate key, assigned once at flush)
        username: 회원 이름 (Username)
        age: 나이 (Age, comparable integer)
        team_id: 소속 팀 FK, nullable (Owning team foreign key)

    Relationships:
        team: 소속 팀 (Owning team). Loaded only through an explicit join;
            touching an unloaded team raises instead of issuing hidden SQL.
    """

    __tablename__ = "members"

    # 회원 고유 식별자 — Member surrogate key (autoincrement)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 회원 이름 — Username (not unique; several members may share one)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    # 나이 — Age
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 소속 팀 FK — Owning team (nullable)
    team_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("teams.id"), nullable=True)

    # 관계 — Relationships
    team = relationship("Team", back_populates="members", lazy="raise_on_sql")

    def __init__(self, username: str | None = None, age: int = 0, team: Team | None = None) -> None:
        self.username = username
        self.age = age
        if team is not None:
            self.change_team(team)

    def change_team(self, team: Team) -> None:
        """소속 팀을 변경합니다.

        Point this member at ``team``; the back-populated ``team.members``
        collection is updated in memory as well.
        """
        self.team = team

    def __repr__(self) -> str:
        return f"Member(id={self.id!r}, username={self.username!r}, age={self.age!r})"
