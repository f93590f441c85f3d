"""API 로깅 미들웨어.

API logging middleware.
Captures request/response data for every API call and emits one structured
event per request: to Axiom when AXIOM_API_TOKEN and AXIOM_DATASET are set,
otherwise to the stdlib ``app.api`` logger.
Logs: method, path, query/path params, status code, duration, error reason.
Sensitive query keys (password, token, secret) are masked.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger("app.api")

# 마스킹 대상 필드 패턴 — Keys to mask in logged parameters
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_dict(data: dict[str, Any]) -> dict[str, Any]:
    """민감 필드 마스킹 — Mask values whose key looks sensitive."""
    return {k: "***" if _SENSITIVE_KEYS.search(k) else v for k, v in data.items()}


async def _read_error_detail(response: Response) -> tuple[Response, str]:
    """에러 응답 body에서 사유를 추출하고 응답을 다시 감쌉니다.

    Drain an error response body, extract its ``detail`` and return a fresh
    response carrying the same bytes.
    """
    body = b""
    async for chunk in response.body_iterator:
        body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

    try:
        data = json.loads(body)
        detail = str(data.get("detail", data)) if isinstance(data, dict) else str(data)
    except (json.JSONDecodeError, UnicodeDecodeError):
        detail = body.decode("utf-8", errors="replace")

    rewrapped = Response(
        content=body,
        status_code=response.status_code,
        headers=dict(response.headers),
        media_type=response.media_type,
    )
    return rewrapped, detail[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Middleware that logs all API requests and responses to Axiom, or to the
    ``app.api`` logger when Axiom is not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 스킵 — Skip excluded paths
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request.query_params:
            event["query_params"] = _mask_dict(dict(request.query_params))

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            if response.status_code >= 400:
                response, event["error"] = await _read_error_detail(response)
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            self._emit(event)

        return response

    def _emit(self, event: dict[str, Any]) -> None:
        """로그 이벤트 전송 — Axiom 또는 표준 로거.

        Ship ``event`` to Axiom, or to the stdlib logger when Axiom is off.
        A failed Axiom ingest is reported locally and never breaks the request.
        """
        if self._client is None:
            level = logging.WARNING if event["status_code"] >= 500 else logging.INFO
            logger.log(level, "%s %s -> %s (%sms)", event["method"], event["path"],
                       event["status_code"], event["duration_ms"], extra={"api_event": event})
            return

        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            logger.exception("Axiom ingest failed for %s %s", event["method"], event["path"])
