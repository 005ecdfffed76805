"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Each class is one error kind of the session lifecycle; the status code is
fixed per kind so services never pick transport codes themselves.

Usage:
    from app.utils.exceptions import NotFoundError, UnauthorizedError
    raise NotFoundError("User does not exist")
    raise UnauthorizedError("Invalid refresh token", reason="expired")
"""

from fastapi import HTTPException, status


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 필수 입력 누락 또는 빈 값.

    400 Bad Request exception.
    Raised when a required input is missing or blank
    (e.g. neither username nor email supplied at login).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Several internal causes (bad signature, expiry, reuse, unknown identity)
    collapse into this one kind. The distinguishing cause is kept in
    ``reason`` for logging and never rendered into the response.

    Args:
        detail: 사용자에게 보이는 메시지 (User-facing message)
        reason: 내부 진단용 사유 (Internal diagnostic reason, optional)
    """

    def __init__(
        self,
        detail: str = "Unauthorized request",
        reason: str | None = None,
    ) -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
        self.reason: str | None = reason


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 사용자를 찾을 수 없을 때 사용.

    404 Not Found exception.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 사용자명/이메일 중복 시 사용.

    409 Conflict exception.
    Raised when a username or email is already taken.
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InternalError(HTTPException):
    """500 Internal Server Error 예외 — 저장/서명 실패.

    500 Internal exception.
    Raised when token signing or a store write fails unexpectedly.
    Not retried; the client may retry the whole flow.
    """

    def __init__(self, detail: str = "Something went wrong") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
