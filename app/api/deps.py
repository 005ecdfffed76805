"""FastAPI 의존성 주입 모듈 — 요청 인증.

FastAPI dependency injection module — Request authentication.

Authentication Flow:
    1. accessToken 쿠키 또는 Authorization: Bearer <token> 헤더에서 토큰 추출
       (Token is read from the accessToken cookie or the Bearer header)
    2. 액세스 비밀키로 서명/만료/구조 검증 (Verified with the access secret)
    3. "sub" 클레임으로 DB에서 사용자 조회 (User is loaded by the "sub" claim)
    4. 실패 시 401 (Any failure answers 401)
"""

from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.services.auth_service import auth_service

# HTTP Bearer 토큰 추출기 — 쿠키 대체 경로이므로 auto_error 비활성화
# (Bearer header is optional because the cookie is an alternative source)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    access_token_cookie: Annotated[str | None, Cookie(alias="accessToken")] = None,
) -> User:
    """요청의 액세스 토큰으로 현재 인증된 사용자를 반환합니다.

    Return the authenticated user for the request's access token.
    The cookie wins over the header when both are present.

    Args:
        db: 비동기 DB 세션 (Async database session)
        credentials: Bearer 자격 증명 (Bearer credentials, optional)
        access_token_cookie: accessToken 쿠키 (accessToken cookie, optional)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰 누락/무효 또는 사용자 없음 (Missing/invalid token or unknown user)
    """
    token: str | None = access_token_cookie or (
        credentials.credentials if credentials is not None else None
    )
    return await auth_service.authenticate(db, token)
