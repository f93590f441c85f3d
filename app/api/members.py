"""회원 라우터 — 회원 조회 엔드포인트.

Member Router — Read endpoints for members.

Endpoints:
    - GET /members/{id}: 회원 이름 조회 (Username as plain text)
    - GET /members2/{id}: 경로 ID를 회원으로 변환하여 이름 조회
      (Same, with the member resolved by a dependency)
    - GET /members: 회원 DTO 페이지 (Page of MemberDto)
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_member_by_path_id, page_request_dependency
from app.database import get_db
from app.models.member import Member
from app.schemas.member import MemberDto
from app.services.member_service import member_service
from app.utils.pagination import Page, PageRequest

router: APIRouter = APIRouter()


@router.get("/members/{id}", response_class=PlainTextResponse)
async def find_member(
    id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> str:
    """ID로 회원 이름을 조회합니다. 없으면 404.

    Return the member's username; 404 when the id does not exist.
    """
    return await member_service.get_username(db, id)


@router.get("/members2/{id}", response_class=PlainTextResponse)
async def find_member2(
    member: Annotated[Member, Depends(get_member_by_path_id)],
) -> str:
    """경로 ID로 변환된 회원의 이름을 반환합니다. 없으면 404.

    Return the username of the member resolved from the path; 404 when missing.
    """
    return member.username or ""


@router.get("/members", response_model=Page[MemberDto])
async def list_members(
    db: Annotated[AsyncSession, Depends(get_db)],
    page_request: Annotated[PageRequest, Depends(page_request_dependency())],
) -> Page[MemberDto]:
    """회원 DTO 페이지를 조회합니다. 기본 크기 5, 이름 오름차순.

    List members as a page of MemberDto (default size 5, sorted by username).
    """
    return await member_service.list_members(db, page_request)
