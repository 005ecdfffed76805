"""structlog 기반 구조화 로깅 설정.

Structured logging configuration built on structlog.
Session lifecycle diagnostics (e.g. why a refresh token was rejected) go
through this channel only and are never echoed to clients.
"""

import logging
import sys
from typing import Any

import structlog

# 마스킹 대상 키 — Event keys whose values are redacted
_SENSITIVE_KEYS: tuple[str, ...] = ("password", "secret", "token", "authorization", "cookie")


def redact_sensitive(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """민감 필드 마스킹 프로세서 — Redact password/token/secret values."""
    for key in list(event_dict.keys()):
        if key == "event":
            continue
        if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
            event_dict[key] = "REDACTED"
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """structlog을 JSON 출력으로 설정합니다.

    Configure structlog to render JSON lines on stdout.

    Args:
        log_level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR)
    """
    level: int = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """이름이 바인딩된 structlog 로거를 반환합니다 (Return a bound structlog logger)."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
