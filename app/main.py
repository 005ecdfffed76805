"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기 및 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and
router registration. Every error is rendered in the uniform failure
envelope {"status_code", "message", "success": false}.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.middleware.request_logging import RequestLoggingMiddleware
from app.schemas.common import ErrorResponse
from app.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = structlog.get_logger(__name__)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# 요청 로깅 미들웨어 — structlog + Axiom request logging
app.add_middleware(RequestLoggingMiddleware)

# CORS 미들웨어 — 쿠키 전송을 위해 출처를 명시 (Explicit origins so cookies are allowed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(status_code=status_code, message=message).model_dump(),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP 예외를 실패 봉투로 변환합니다 (Render HTTP errors in the failure envelope)."""
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 오류를 400으로 변환합니다 (Render validation errors as 400)."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(loc) for loc in first.get("loc", ["unknown"]))
        message = f"Field '{field}': {first.get('msg', 'Validation failed')}"
    else:
        message = "Request validation failed"
    logger.warning("validation_error", path=request.url.path, detail=message)
    return _error_response(400, message)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """예상치 못한 DB 오류를 500으로 변환합니다 (Render unexpected store errors as 500)."""
    logger.error("database_error", path=request.url.path, error=str(exc))
    return _error_response(500, "Something went wrong")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.users import users_router  # noqa: E402

app.include_router(users_router, prefix="/api/v1/users")
