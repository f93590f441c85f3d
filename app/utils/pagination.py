"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides sort specifications, a zero-based page request, and typed Page/Slice
response models, plus ``paginate``/``paginate_slice`` helpers that apply a
page request to a ``Select`` for consistent pagination across the API.

Usage:
    request = PageRequest.of(0, 3, Sort.by("username", direction=Direction.DESC))
    page = await paginate(db, select(Member).where(Member.age == 10), request, Member)
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.exceptions import InvalidSortPropertyError

T = TypeVar("T")
R = TypeVar("R")


class Direction(str, Enum):
    """정렬 방향 (Sort direction)."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_string(cls, value: str) -> "Direction":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid sort direction '{value}'; expected 'asc' or 'desc'") from None


@dataclass(frozen=True)
class Order:
    """단일 속성 정렬 기준 (Sort order for one property)."""

    property: str
    direction: Direction = Direction.ASC

    def __str__(self) -> str:
        return f"{self.property},{self.direction.value}"


@dataclass(frozen=True)
class Sort:
    """정렬 명세 — 적용 순서대로 나열된 Order 목록.

    Sort specification: orders applied left to right.
    """

    orders: tuple[Order, ...] = ()

    @classmethod
    def by(cls, *properties: str, direction: Direction = Direction.ASC) -> "Sort":
        return cls(tuple(Order(p, direction) for p in properties))

    @classmethod
    def unsorted(cls) -> "Sort":
        return cls()

    @classmethod
    def parse(cls, values: Iterable[str]) -> "Sort":
        """요청 파라미터 문자열을 정렬 명세로 변환합니다.

        Parse request values such as ``"username"``, ``"username,desc"`` or
        ``"age,username,asc"``. A trailing ``asc``/``desc`` token applies to
        every property in the same value.

        Raises:
            ValueError: 속성 이름이 비어 있을 때 (A value names no property)
        """
        orders: list[Order] = []
        for value in values:
            tokens = [t.strip() for t in value.split(",") if t.strip()]
            direction = Direction.ASC
            if tokens and tokens[-1].lower() in ("asc", "desc"):
                direction = Direction.from_string(tokens.pop())
            if not tokens:
                raise ValueError(f"Sort parameter '{value}' names no property")
            orders.extend(Order(t, direction) for t in tokens)
        return cls(tuple(orders))

    def and_(self, other: "Sort") -> "Sort":
        return Sort(self.orders + other.orders)

    def is_sorted(self) -> bool:
        return bool(self.orders)

    def __iter__(self):
        return iter(self.orders)


@dataclass(frozen=True)
class PageRequest:
    """0부터 시작하는 페이지 요청.

    Zero-based page request: page index, page size and sort.
    """

    page: int
    size: int
    sort: Sort = field(default_factory=Sort.unsorted)

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("Page index must not be less than zero")
        if self.size < 1:
            raise ValueError("Page size must not be less than one")

    @classmethod
    def of(cls, page: int, size: int, sort: Sort | None = None) -> "PageRequest":
        return cls(page=page, size=size, sort=sort or Sort.unsorted())

    @property
    def offset(self) -> int:
        return self.page * self.size

    def next(self) -> "PageRequest":
        return PageRequest(self.page + 1, self.size, self.sort)


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result model for typed responses.
    Contains the page content and metadata for client-side pagination controls.

    Attributes:
        content: 현재 페이지 항목 목록 (Items for the current page)
        number: 현재 페이지 번호 — 0부터 시작 (Current page index, 0-based)
        size: 요청 페이지 크기 (Requested page size)
        total_elements: 전체 항목 수 (Total count across all pages)
        sort: 적용된 정렬 "property,direction" (Applied sort orders)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: list[T]  # 현재 페이지 항목 목록 (Page content)
    number: int  # 현재 페이지 번호 — 0부터 시작 (Current page, 0-indexed)
    size: int = Field(ge=1)  # 페이지 크기 (Page size)
    total_elements: int  # 전체 항목 수 (Total item count)
    sort: list[str] = []  # 정렬 기준 (Sort orders as "property,direction")

    @computed_field
    @property
    def total_pages(self) -> int:
        """전체 페이지 수 (ceil(total_elements / size))."""
        return math.ceil(self.total_elements / self.size)

    @computed_field
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @computed_field
    @property
    def first(self) -> bool:
        return self.number == 0

    @computed_field
    @property
    def last(self) -> bool:
        return not self.has_next

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @computed_field
    @property
    def empty(self) -> bool:
        return not self.content

    def is_first(self) -> bool:
        return self.first

    def map(self, converter: Callable[[T], R]) -> "Page[R]":
        """동일한 메타데이터로 내용만 변환한 페이지를 반환합니다.

        Return a page with each item converted and identical metadata.
        """
        return Page(
            content=[converter(item) for item in self.content],
            number=self.number,
            size=self.size,
            total_elements=self.total_elements,
            sort=list(self.sort),
        )


class Slice(BaseModel, Generic[T]):
    """카운트 쿼리 없는 페이지 조각.

    Page slice without a total count; only knows whether a next slice exists.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: list[T]
    number: int
    size: int = Field(ge=1)
    has_next: bool
    sort: list[str] = []

    @computed_field
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @computed_field
    @property
    def first(self) -> bool:
        return self.number == 0

    @computed_field
    @property
    def last(self) -> bool:
        return not self.has_next

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.number > 0


def apply_sort(query: Select[Any], model: type, sort: Sort) -> Select[Any]:
    """정렬 명세를 SELECT 쿼리에 적용합니다.

    Apply ``sort`` to ``query`` using the mapped columns of ``model``.
    The primary key is appended as a final tie-breaker so page boundaries are
    stable between requests.

    Raises:
        InvalidSortPropertyError: 모델에 없는 속성으로 정렬할 때
                                  (A property is not a mapped column of the model)
    """
    mapper = inspect(model)
    columns = {attr.key: getattr(model, attr.key) for attr in mapper.column_attrs}

    ordered_keys: set[str] = set()
    for order in sort:
        column = columns.get(order.property)
        if column is None:
            raise InvalidSortPropertyError(order.property, model.__name__)
        query = query.order_by(column.desc() if order.direction is Direction.DESC else column.asc())
        ordered_keys.add(order.property)

    for pk in mapper.primary_key:
        if pk.key not in ordered_keys:
            query = query.order_by(getattr(model, pk.key).asc())
    return query


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page_request: PageRequest,
    model: type,
) -> Page[Any]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning a Page with its total.
    The content query runs first; the COUNT query (via subquery) is skipped
    when the content alone already determines the total, i.e. on a short
    first page or a short last page.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: 정렬 전 SQLAlchemy Select 쿼리 (Unsorted base query)
        page_request: 페이지 요청 (Zero-based page request with sort)
        model: 정렬 속성을 해석할 모델 클래스 (Model used to resolve sort properties)

    Returns:
        Page[Any]: 정렬 후 잘라낸 페이지 (Sorted, sliced page with metadata)
    """
    sorted_query = apply_sort(query, model, page_request.sort)

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    result = await db.execute(sorted_query.offset(page_request.offset).limit(page_request.size))
    items: Sequence[Any] = result.scalars().all()

    if page_request.offset == 0 and len(items) < page_request.size:
        total: int = len(items)
    elif 0 < len(items) < page_request.size:
        total = page_request.offset + len(items)
    else:
        # 전체 개수 조회 — 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await db.execute(count_query)).scalar() or 0

    return Page(
        content=list(items),
        number=page_request.page,
        size=page_request.size,
        total_elements=total,
        sort=[str(order) for order in page_request.sort],
    )


async def paginate_slice(
    db: AsyncSession,
    query: Select[Any],
    page_request: PageRequest,
    model: type,
) -> Slice[Any]:
    """COUNT 없이 size + 1건을 조회하여 다음 조각 존재 여부를 판단합니다.

    Fetch ``size + 1`` rows to decide ``has_next`` without a COUNT query.
    """
    sorted_query = apply_sort(query, model, page_request.sort)
    result = await db.execute(sorted_query.offset(page_request.offset).limit(page_request.size + 1))
    items: list[Any] = list(result.scalars().all())

    has_next: bool = len(items) > page_request.size
    return Slice(
        content=items[: page_request.size],
        number=page_request.page,
        size=page_request.size,
        has_next=has_next,
        sort=[str(order) for order in page_request.sort],
    )
