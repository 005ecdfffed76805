"""API 요청 로깅 미들웨어 — structlog 기록 및 Axiom 전송.

API request logging middleware.
Every request produces one structlog event (method, path, status,
duration, masked JSON body, error message). When Axiom is configured the
same event is also shipped to the Axiom dataset.
Sensitive fields (password, token, secret, cookie) are always masked.
"""

import json
import re
import time
from typing import Any

import structlog
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = structlog.get_logger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|cookie|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 기록하는 미들웨어.

    Middleware that logs every API request and optionally ships it to Axiom.
    Multipart bodies (file uploads) are never read or logged.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_json_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        if "application/json" not in request.headers.get("content-type", ""):
            return None
        try:
            body_bytes = await request.body()
            return mask_sensitive(json.loads(body_bytes)) if body_bytes else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 스킵 — Skip excluded paths
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()
        method = request.method
        path = request.url.path
        request_body: Any = await self._read_json_body(request)

        error_message: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 메시지 추출 — Extract the message from error envelopes
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

                try:
                    error_message = str(json.loads(resp_body).get("message", ""))[:500]
                except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
                    error_message = resp_body.decode("utf-8", errors="replace")[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                # raw_headers 유지 — repeated headers such as set-cookie survive
                rewrapped = Response(content=resp_body, status_code=status_code)
                rewrapped.raw_headers = list(response.raw_headers)
                response = rewrapped
        except Exception as exc:
            error_message = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event: dict[str, Any] = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if request.query_params:
                event["query_params"] = mask_sensitive(dict(request.query_params))
            if request_body is not None:
                event["request_body"] = request_body
            if error_message:
                event["error"] = error_message

            logger.info("http_request", **event)
            self._ship(event)

        return response

    def _ship(self, event: dict[str, Any]) -> None:
        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:
            # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log shipping
            logger.warning("axiom_ingest_failed", error=str(exc))
