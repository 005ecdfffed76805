"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, token refresh, and password change.
"""

from pydantic import BaseModel

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema. At least one of username or email is required;
    the check happens in the service so a missing value maps to 400.

    Attributes:
        username: 사용자 로그인 아이디 (User login identifier, optional)
        email: 이메일 (Email address, optional)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str | None = None  # 사용자 로그인 아이디 (User login identifier)
    email: str | None = None  # 이메일 (Email address)
    password: str = ""  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class RefreshRequest(BaseModel):
    """토큰 갱신 요청 스키마.

    Token refresh request schema. The token may also arrive as the
    ``refreshToken`` cookie, which takes precedence.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token to exchange)
    """

    refresh_token: str | None = None


class TokenResponse(BaseModel):
    """JWT 토큰 쌍 응답 스키마.

    JWT token pair returned after login or refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
    """

    access_token: str
    refresh_token: str


class LoginResponse(TokenResponse):
    """로그인 응답 스키마 — 토큰 쌍과 비밀정보가 제거된 사용자 정보.

    Login response: token pair plus the redacted user view.
    """

    user: UserResponse


class ChangePasswordRequest(BaseModel):
    """비밀번호 변경 요청 스키마.

    Attributes:
        old_password: 현재 비밀번호 (Current password)
        new_password: 새 비밀번호 (New password)
    """

    old_password: str = ""
    new_password: str = ""
