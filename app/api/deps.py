"""FastAPI 의존성 주입 모듈 — 페이지 요청 및 회원 경로 변환.

FastAPI dependency injection module — Page requests and member lookup.
Provides reusable dependencies for building a PageRequest from query
parameters and for resolving a member straight from a path id.

Paging parameters:
    - page: 0부터 시작하는 페이지 번호 (Zero-based page index, default 0)
    - size: 페이지 크기 (Page size, default settings.DEFAULT_PAGE_SIZE,
      capped at settings.MAX_PAGE_SIZE)
    - sort: "property[,asc|desc]", 여러 번 지정 가능
      (Repeatable; default "username,asc")
"""

from typing import Annotated, Callable

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.member import Member
from app.services.member_service import member_service
from app.utils.exceptions import BadRequestError
from app.utils.pagination import PageRequest, Sort


def page_request_dependency(
    default_size: int | None = None,
    default_sort: tuple[str, ...] = ("username",),
) -> Callable[..., PageRequest]:
    """기본값을 지정한 PageRequest 의존성을 생성합니다.

    Build a dependency that turns ``page``/``size``/``sort`` query parameters
    into a PageRequest, falling back to the given defaults.

    Args:
        default_size: 기본 페이지 크기, None이면 설정값 (Default size; settings when None)
        default_sort: 기본 정렬 (Default sort values)

    Returns:
        Callable[..., PageRequest]: FastAPI 의존성 함수 (FastAPI dependency)
    """

    def _dependency(
        page: Annotated[int, Query(ge=0)] = 0,
        size: Annotated[int | None, Query(ge=1)] = None,
        sort: Annotated[list[str] | None, Query()] = None,
    ) -> PageRequest:
        page_size: int = size or default_size or settings.DEFAULT_PAGE_SIZE
        page_size = min(page_size, settings.MAX_PAGE_SIZE)
        try:
            sort_spec: Sort = Sort.parse(sort or default_sort)
        except ValueError as exc:
            raise BadRequestError(str(exc)) from exc
        return PageRequest.of(page, page_size, sort_spec)

    return _dependency


async def get_member_by_path_id(
    id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Member:
    """경로의 ID로 회원을 조회하여 핸들러에 주입합니다.

    Resolve the ``{id}`` path parameter into a Member for the handler.

    Raises:
        NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
    """
    return await member_service.get_member(db, id)
