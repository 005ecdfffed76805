"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions.
Every endpoint answers in the same envelope: a status code, a payload and
a human-readable message. Failures carry the status code and message only
(see ErrorResponse).
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

# 페이로드 타입 변수 — Payload type variable
DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """성공 응답 봉투 스키마.

    Success response envelope.

    Attributes:
        status_code: HTTP 상태 코드 (HTTP status code)
        data: 응답 페이로드 (Response payload)
        message: 응답 메시지 (Human-readable message)
        success: 성공 여부 — 항상 True (Always True for this envelope)
    """

    status_code: int
    data: DataT
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """실패 응답 봉투 스키마.

    Failure response envelope rendered by the global exception handler.

    Attributes:
        status_code: HTTP 상태 코드 (HTTP status code)
        message: 오류 메시지 (Error message)
        success: 항상 False (Always False)
    """

    status_code: int
    message: str
    success: bool = False
