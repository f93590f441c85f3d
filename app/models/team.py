"""팀 SQLAlchemy ORM 모델 정의.

Team SQLAlchemy ORM model definition.

Tables:
    - teams: 회원이 소속되는 팀 (Teams that members belong to)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Team(Base):
    """팀 모델 — 회원 다대일 연관의 대상.

    Team model — Target of the Member many-to-one association.

    Attributes:
        id: 고유 식별자, 삽입 시 생성 (Surrogate key generated on insert)
        name: 팀 이름 (Team name)

    Relationships:
        members: 소속 회원 목록, 연관의 역방향 (Inverse side of Member.team).
            Not loaded implicitly; use an explicit eager load to read it.
    """

    __tablename__ = "teams"

    # 팀 고유 식별자 — Team surrogate key (autoincrement)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 팀 이름 — Team display name
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # 관계 — Relationships (역방향, 지연 로딩 없음)
    members = relationship("Member", back_populates="team", lazy="raise_on_sql")

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Team(id={self.id!r}, name={self.name!r})"
