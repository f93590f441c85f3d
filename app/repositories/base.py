"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic save, lookup, listing, paging, count and delete operations.
Repositories hold no session; every call receives the caller's AsyncSession,
so one request is one unit of work.

Usage:
    class TeamRepository(BaseRepository[Team]):
        def __init__(self) -> None:
            super().__init__(Team)
"""

import logging
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.utils.exceptions import ConstraintViolationError, IncorrectResultSizeError
from app.utils.optional import OptionalResult
from app.utils.pagination import Page, PageRequest, paginate

logger = logging.getLogger(__name__)

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    async def save(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """엔티티를 저장하고 식별자를 할당합니다.

        Persist ``entity`` and flush so its surrogate id is assigned.
        The same instance is returned; it stays in the session's identity map.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: 저장할 엔티티 (Entity to persist)

        Returns:
            ModelType: id가 할당된 동일 인스턴스 (Same instance, id assigned)

        Raises:
            ConstraintViolationError: 외래 키 등 제약 위반 시
                                      (Flush violated a database constraint)
        """
        db.add(entity)
        try:
            await db.flush()
        except IntegrityError as exc:
            logger.warning("Constraint violation saving %s: %s", self.model.__name__, exc.orig)
            raise ConstraintViolationError(
                f"Constraint violation saving {self.model.__name__}"
            ) from exc
        return entity

    async def get_by_id(self, db: AsyncSession, record_id: int) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its id. Instances already in the session
        are returned from the identity map without a round trip.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 ID (Id of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        return await db.get(self.model, record_id)

    async def find_by_id(self, db: AsyncSession, record_id: int) -> OptionalResult[ModelType]:
        """ID로 조회하여 OptionalResult로 감싸 반환합니다.

        Retrieve a record by id wrapped in an OptionalResult.
        """
        return OptionalResult.of_nullable(await self.get_by_id(db, record_id))

    async def find_all(self, db: AsyncSession) -> list[ModelType]:
        """모든 레코드를 ID 순으로 조회합니다.

        Retrieve every record ordered by id.
        """
        query: Select = select(self.model).order_by(self.model.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_all_paged(self, db: AsyncSession, page_request: PageRequest) -> Page[ModelType]:
        """모든 레코드를 페이지 단위로 조회합니다.

        Retrieve one page of all records, sorted per the page request.
        """
        return await paginate(db, select(self.model), page_request, self.model)

    async def count(self, db: AsyncSession) -> int:
        """전체 레코드 수를 반환합니다.

        Return the total number of persisted records.
        """
        query: Select = select(func.count()).select_from(self.model)
        return (await db.execute(query)).scalar() or 0

    async def delete(self, db: AsyncSession, entity: ModelType) -> None:
        """엔티티를 삭제합니다.

        Delete ``entity`` and flush. The in-memory instance is left untouched
        and must not be used afterwards.
        """
        await db.delete(entity)
        await db.flush()

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """주어진 조건에 일치하는 레코드가 존재하는지 확인합니다.

        Check if a record matching the given filters exists.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 검색 조건 딕셔너리 (Filter criteria dictionary)

        Returns:
            bool: 레코드 존재 여부 (Whether a matching record exists)
        """
        query: Select = select(func.count()).select_from(self.model)
        for column_name, value in filters.items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)

        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def _single_result(self, db: AsyncSession, query: Select) -> ModelType | None:
        """단건 조회 — 결과가 없으면 None, 둘 이상이면 예외.

        Run ``query`` expecting at most one row; reads no more than two rows.

        Raises:
            IncorrectResultSizeError: 두 건 이상 조회될 때 (More than one row matched)
        """
        result = await db.execute(query.limit(2))
        rows: Sequence[ModelType] = result.scalars().all()
        if len(rows) > 1:
            raise IncorrectResultSizeError(expected=1, actual=len(rows))
        return rows[0] if rows else None
