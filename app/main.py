"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 핸들러, 라우터 등록.

FastAPI application entry point — Middleware, exception handler and router
registration. The lifespan hook seeds the initial member on startup.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.seed import create_schema, seed
from app.utils.exceptions import IncorrectResultSizeError, InvalidSortPropertyError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """시작 시 스키마를 준비하고 초기 회원을 시드합니다.

    Optionally create the schema, then seed the initial member once.
    """
    if settings.CREATE_SCHEMA_ON_STARTUP:
        await create_schema()
    if settings.SEED_ON_STARTUP:
        await seed()
    yield


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# API 로깅 미들웨어 — API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidSortPropertyError)
async def invalid_sort_handler(request: Request, exc: InvalidSortPropertyError) -> JSONResponse:
    """정렬 속성 오류를 400으로 변환합니다 (Unknown sort property → 400)."""
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.detail})


@app.exception_handler(IncorrectResultSizeError)
async def incorrect_result_size_handler(request: Request, exc: IncorrectResultSizeError) -> JSONResponse:
    """단건 조회 결과 초과를 409로 변환합니다 (Ambiguous single result → 409)."""
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.detail})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.members import router as members_router  # noqa: E402

app.include_router(members_router, tags=["Members"])
