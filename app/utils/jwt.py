"""JWT 토큰 발급 및 검증 유틸리티 모듈.

JWT token issuance and verification utility module.
Access and refresh tokens are signed with distinct secrets and carry
distinct expiry windows, so leaking one secret does not compromise the
other token kind.

JWT Payload Structure:
    Access token:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier)
        "username": "neo",          # 프로필 클레임 (Profile claims, non-sensitive)
        "email": "neo@x.io",
        "full_name": "Neo",
        "type": "access",           # 토큰 유형 (Token type discriminator)
        "iat": 1234567000,          # 발급 시간 (Issued-at)
        "exp": 1234567890,          # 만료 시간 (Expiration)
        "jti": "hex"                # 토큰 고유 ID (Unique token id)
    }

    Refresh token: sub, type="refresh", iat, exp, jti only.

Verification order:
    서명 → 만료 → 구조 검사 순서 (signature, then expiry, then claim structure)
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.config import Settings, settings

ACCESS_TOKEN_TYPE: str = "access"
REFRESH_TOKEN_TYPE: str = "refresh"

# 발급 시 예약된 클레임 — Claims set by the issuer, never taken from callers
_RESERVED_CLAIMS: frozenset[str] = frozenset({"sub", "type", "iat", "exp", "jti"})


class TokenErrorKind(str, enum.Enum):
    """토큰 검증 실패 유형 (Token verification failure kinds)."""

    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"
    MALFORMED = "malformed"


class TokenError(Exception):
    """토큰 검증 실패 예외.

    Raised by verify_token(). The kind is meant for internal diagnostics
    only and is never placed in a user-facing message.

    Attributes:
        kind: 실패 유형 (Failure kind)
    """

    def __init__(self, kind: TokenErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind: TokenErrorKind = kind


@dataclass(frozen=True)
class TokenSettings:
    """토큰 서명 설정 — 발급기/검증기에 주입되는 값.

    Signing configuration injected into JWTManager at construction.
    Every field is mandatory; the manager holds no defaults of its own.

    Attributes:
        access_secret: 액세스 토큰 서명 비밀키 (Access token secret)
        refresh_secret: 리프레시 토큰 서명 비밀키 (Refresh token secret)
        access_ttl: 액세스 토큰 유효 기간 (Access token lifetime)
        refresh_ttl: 리프레시 토큰 유효 기간 (Refresh token lifetime)
        algorithm: 서명 알고리즘 (Signing algorithm)
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Token secrets must not be empty")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh token secrets must differ")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ValueError("Token lifetimes must be positive")

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenSettings":
        """애플리케이션 설정에서 토큰 설정을 생성합니다.

        Build token settings from the application settings.
        """
        return cls(
            access_secret=config.ACCESS_TOKEN_SECRET,
            refresh_secret=config.REFRESH_TOKEN_SECRET,
            access_ttl=timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=config.JWT_ALGORITHM,
        )


def _encode(
    subject: str,
    token_type: str,
    ttl: timedelta,
    secret: str,
    algorithm: str,
    extra: dict[str, Any] | None = None,
) -> str:
    now: datetime = datetime.now(timezone.utc)
    payload: dict[str, Any] = dict(extra or {})
    payload.update({
        "sub": subject,
        "type": token_type,
        "iat": now,
        "exp": now + ttl,
        # jti — 같은 초에 발급된 토큰도 서로 다른 문자열이 되도록 (distinct strings within one second)
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: str,
    token_type: str,
) -> dict[str, Any]:
    """JWT 토큰을 검증하고 클레임을 반환합니다.

    Verify a token's signature, expiry and claim structure, in that order.
    PyJWT checks the signature before it validates "exp", so the most
    security-relevant failure is reported when several apply.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)
        secret: 검증용 비밀키 (Secret the token must be signed with)
        algorithm: 서명 알고리즘 (Signing algorithm)
        token_type: 기대하는 토큰 유형 (Expected "type" claim)

    Returns:
        dict[str, Any]: 디코딩된 클레임 (Decoded claims)

    Raises:
        TokenError: BAD_SIGNATURE, EXPIRED 또는 MALFORMED
    """
    try:
        payload: dict[str, Any] = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise TokenError(TokenErrorKind.EXPIRED, "Token has expired") from exc
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
        raise TokenError(TokenErrorKind.BAD_SIGNATURE, "Token signature is invalid") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, "Token is malformed") from exc

    subject: Any = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise TokenError(TokenErrorKind.MALFORMED, "Token has no subject")
    if payload.get("type") != token_type:
        raise TokenError(TokenErrorKind.MALFORMED, "Unexpected token type")
    if "exp" not in payload or "iat" not in payload:
        raise TokenError(TokenErrorKind.MALFORMED, "Token has no lifetime claims")
    return payload


class JWTManager:
    """액세스/리프레시 토큰 발급기 및 검증기.

    Token issuer and verifier bound to one TokenSettings value.
    Pure with respect to storage: persisting the refresh token is the
    caller's job.
    """

    def __init__(self, config: TokenSettings) -> None:
        self.config: TokenSettings = config

    def issue_access_token(self, user_id: str, claims: dict[str, Any] | None = None) -> str:
        """액세스 토큰을 발급합니다.

        Issue a short-lived access token carrying the identity and a few
        non-sensitive profile claims.

        Args:
            user_id: 사용자 ID (Identity id placed in "sub")
            claims: 추가 프로필 클레임 (Extra profile claims)

        Returns:
            str: 서명된 액세스 토큰 (Signed access token)
        """
        extra: dict[str, Any] = {
            key: value for key, value in (claims or {}).items()
            if key not in _RESERVED_CLAIMS
        }
        return _encode(
            user_id,
            ACCESS_TOKEN_TYPE,
            self.config.access_ttl,
            self.config.access_secret,
            self.config.algorithm,
            extra,
        )

    def issue_refresh_token(self, user_id: str) -> str:
        """리프레시 토큰을 발급합니다 (사용자 ID 클레임만 포함).

        Issue a long-lived refresh token carrying the identity claim only.
        """
        return _encode(
            user_id,
            REFRESH_TOKEN_TYPE,
            self.config.refresh_ttl,
            self.config.refresh_secret,
            self.config.algorithm,
        )

    def verify_access_token(self, token: str) -> dict[str, Any]:
        """액세스 비밀키로 토큰을 검증합니다 (Verify with the access secret)."""
        return verify_token(token, self.config.access_secret, self.config.algorithm, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> dict[str, Any]:
        """리프레시 비밀키로 토큰을 검증합니다 (Verify with the refresh secret)."""
        return verify_token(token, self.config.refresh_secret, self.config.algorithm, REFRESH_TOKEN_TYPE)


# 싱글턴 인스턴스 — Singleton instance built from application settings
jwt_manager: JWTManager = JWTManager(TokenSettings.from_settings(settings))
