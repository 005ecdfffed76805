"""인증 서비스 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 비밀번호 변경.

Auth Service — Session lifecycle for registration, login, token refresh,
logout and password change.

Session states:
    Anonymous → Authenticated (login) → Refreshed* (refresh) → Revoked (logout)

Expiry is evaluated lazily when a token is verified; nothing is swept.
Every refresh rotates the stored token through a compare-and-swap, so a
refresh token can be exchanged at most once.

Rejection causes (bad signature, expiry, reuse, unknown identity) are
logged through structlog and collapse into one 401 for the client.

Password change leaves the stored refresh token and any issued access
tokens untouched; outstanding sessions stay valid until they expire or
the user logs out.
"""

import hmac
from uuid import UUID

import jwt
import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    TokenResponse,
)
from app.schemas.user import UserResponse
from app.services.storage_service import MediaFile, StorageError, storage_service
from app.services.user_service import to_user_response
from app.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from app.utils.jwt import JWTManager, TokenError, jwt_manager
from app.utils.password import (
    MAX_PASSWORD_BYTES,
    hash_password,
    password_too_long,
    verify_password,
)

logger = structlog.get_logger(__name__)

_TOKEN_REUSED: str = "Refresh token is expired or used"
_TOKEN_INVALID: str = "Invalid refresh token"
_PASSWORD_TOO_LONG: str = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"


def _same_token(presented: str, stored: str | None) -> bool:
    """저장된 토큰과 정확히 일치하는지 비교 (Exact, constant-time string comparison)."""
    if stored is None:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling the session lifecycle.

    Args:
        tokens: 토큰 발급기/검증기 (Token issuer/verifier with injected secrets)
    """

    def __init__(self, tokens: JWTManager) -> None:
        self.tokens: JWTManager = tokens

    def _issue_pair(self, user: User) -> TokenResponse:
        """액세스/리프레시 토큰 쌍을 서명합니다.

        Sign a new access/refresh token pair for the user.

        Raises:
            InternalError: 서명 실패 시 (Signing failed)
        """
        try:
            access_token: str = self.tokens.issue_access_token(
                str(user.id),
                {
                    "username": user.username,
                    "email": user.email,
                    "full_name": user.full_name,
                },
            )
            refresh_token: str = self.tokens.issue_refresh_token(str(user.id))
        except jwt.PyJWTError as exc:
            logger.error("token_signing_failed", user_id=str(user.id), error=str(exc))
            raise InternalError("Something went wrong while generating the tokens")
        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def register(
        self,
        db: AsyncSession,
        full_name: str | None,
        email: str | None,
        username: str | None,
        password: str | None,
        avatar: MediaFile | None,
        cover_image: MediaFile | None = None,
    ) -> UserResponse:
        """회원가입을 처리합니다.

        Register a new user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            full_name: 실명 (Full name)
            email: 이메일 (Email)
            username: 사용자명 (Username)
            password: 비밀번호 (Plain text password)
            avatar: 아바타 이미지 — 필수 (Avatar image, required)
            cover_image: 커버 이미지 — 선택 (Cover image, optional)

        Returns:
            UserResponse: 생성된 사용자 정보 (Created user view)

        Raises:
            BadRequestError: 필수 필드 또는 아바타 누락, 비밀번호 72바이트 초과
                             (Missing field or avatar, or over-long password)
            DuplicateError: 사용자명/이메일 중복 (Username or email taken)
        """
        fields: list[str | None] = [full_name, email, username, password]
        if any(field is None or not field.strip() for field in fields):
            raise BadRequestError("All fields are required")
        if password_too_long(password):
            raise BadRequestError(_PASSWORD_TOO_LONG)

        normalized_username: str = username.strip().lower()
        normalized_email: str = email.strip().lower()

        # 사용자명/이메일 중복 확인 — Either match means conflict
        existing: User | None = await user_repository.get_by_username_or_email(
            db, normalized_username, normalized_email
        )
        if existing is not None:
            raise DuplicateError("User with email or username already exists")

        if avatar is None or not avatar.data:
            raise BadRequestError("Avatar file is required")

        try:
            avatar_url: str = storage_service.upload(avatar, "avatars")
        except StorageError:
            raise BadRequestError("Avatar file is required")

        cover_url: str = ""
        if cover_image is not None and cover_image.data:
            try:
                cover_url = storage_service.upload(cover_image, "covers")
            except StorageError:
                raise BadRequestError("Error while uploading cover image")

        try:
            user: User = await user_repository.create(
                db,
                {
                    "full_name": full_name.strip(),
                    "email": normalized_email,
                    "username": normalized_username,
                    "avatar": avatar_url,
                    "cover_image": cover_url,
                    "password_hash": hash_password(password),
                },
            )
        except IntegrityError:
            # 동시 가입 경쟁 — Unique constraint hit by a concurrent registration
            raise DuplicateError("User with email or username already exists")

        logger.info("user_registered", user_id=str(user.id))
        return to_user_response(user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> LoginResponse:
        """로그인을 처리합니다.

        Authenticate by username or email plus password and open a session.
        On any failure no token pair is returned and the store is untouched.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Login request data)

        Returns:
            LoginResponse: 토큰 쌍과 사용자 정보 (Token pair and redacted user)

        Raises:
            BadRequestError: 사용자명과 이메일이 모두 없을 때 (Neither supplied)
            NotFoundError: 사용자가 없을 때 (No such user)
            UnauthorizedError: 비밀번호 불일치 (Wrong password)
            InternalError: 토큰 서명 또는 저장 실패 (Signing or store write failed)
        """
        username: str = (data.username or "").strip()
        email: str = (data.email or "").strip()
        if not username and not email:
            raise BadRequestError("username or email is required")

        user: User | None = await user_repository.get_by_username_or_email(
            db, username, email
        )
        if user is None:
            logger.info("login_rejected", reason="unknown_identity")
            raise NotFoundError("User does not exist")

        if not verify_password(data.password, user.password_hash):
            logger.info("login_rejected", reason="bad_credentials", user_id=str(user.id))
            raise UnauthorizedError("Invalid user credentials", reason="bad_credentials")

        pair: TokenResponse = self._issue_pair(user)

        # 리프레시 토큰 저장 — 이전 값은 무조건 덮어씀 (Overwrite the slot unconditionally)
        try:
            await user_repository.set_refresh_token(db, user.id, pair.refresh_token)
        except (SQLAlchemyError, NotFoundError) as exc:
            logger.error("refresh_token_persist_failed", user_id=str(user.id), error=str(exc))
            raise InternalError("Something went wrong while generating the tokens")

        logger.info("login_succeeded", user_id=str(user.id))
        return LoginResponse(
            user=to_user_response(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    def _reject_refresh(self, reason: str, message: str, user_id: str | None = None) -> UnauthorizedError:
        logger.warning("refresh_rejected", reason=reason, user_id=user_id)
        return UnauthorizedError(message, reason=reason)

    async def refresh(
        self,
        db: AsyncSession,
        presented: str | None,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Exchange a live refresh token for a new pair. The presented token
        must equal the stored one; the swap to the new token only succeeds
        while the slot still holds the presented value.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            presented: 제시된 리프레시 토큰 (Presented refresh token)

        Returns:
            TokenResponse: 새 토큰 쌍 (New token pair)

        Raises:
            UnauthorizedError: 토큰이 없거나, 무효/만료/재사용되었을 때
                               (Missing, invalid, expired or reused token)
            InternalError: 저장 실패 (Store write failed)
        """
        if not presented:
            raise self._reject_refresh("missing", "Unauthorized request")

        try:
            claims: dict = self.tokens.verify_refresh_token(presented)
        except TokenError as exc:
            raise self._reject_refresh(exc.kind.value, _TOKEN_INVALID)

        try:
            user_id: UUID = UUID(claims["sub"])
        except ValueError:
            raise self._reject_refresh("malformed", _TOKEN_INVALID)

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise self._reject_refresh("unknown_identity", _TOKEN_INVALID, str(user_id))

        if not _same_token(presented, user.refresh_token):
            raise self._reject_refresh("token_mismatch", _TOKEN_REUSED, str(user_id))

        pair: TokenResponse = self._issue_pair(user)

        try:
            swapped: bool = await user_repository.set_refresh_token(
                db, user.id, pair.refresh_token, expected=presented
            )
        except NotFoundError:
            raise self._reject_refresh("unknown_identity", _TOKEN_INVALID, str(user_id))
        except SQLAlchemyError as exc:
            logger.error("refresh_token_persist_failed", user_id=str(user_id), error=str(exc))
            raise InternalError("Something went wrong while generating the tokens")

        if not swapped:
            # 다른 요청이 먼저 교체함 — Another request rotated the token first
            raise self._reject_refresh("rotation_conflict", _TOKEN_REUSED, str(user_id))

        logger.info("refresh_succeeded", user_id=str(user_id))
        return pair

    async def logout(
        self,
        db: AsyncSession,
        user: User,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰 슬롯을 비웁니다.

        Revoke the session by clearing the refresh token slot. Idempotent.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 인증된 사용자 (Authenticated user)
        """
        await user_repository.set_refresh_token(db, user.id, None)
        logger.info("logout_succeeded", user_id=str(user.id))

    async def change_password(
        self,
        db: AsyncSession,
        user: User,
        data: ChangePasswordRequest,
    ) -> None:
        """비밀번호를 변경합니다.

        Change the password of an authenticated user after verifying the
        old one. Existing sessions are not revoked.

        Raises:
            BadRequestError: 새 비밀번호가 비어 있거나 72바이트 초과
                             (Blank or over-long new password)
            UnauthorizedError: 기존 비밀번호 불일치 (Old password mismatch)
        """
        if not data.new_password.strip():
            raise BadRequestError("New password is required")
        if password_too_long(data.new_password):
            raise BadRequestError(_PASSWORD_TOO_LONG)

        if not verify_password(data.old_password, user.password_hash):
            logger.info("password_change_rejected", reason="bad_credentials", user_id=str(user.id))
            raise UnauthorizedError("Invalid old password", reason="bad_credentials")

        new_hash: str = hash_password(data.new_password)
        await user_repository.set_password_hash(db, user.id, new_hash)
        logger.info("password_changed", user_id=str(user.id))

    async def authenticate(
        self,
        db: AsyncSession,
        access_token: str | None,
    ) -> User:
        """액세스 토큰으로 요청 사용자를 확인합니다.

        Resolve the user behind an access token.

        Raises:
            UnauthorizedError: 토큰이 없거나 무효, 또는 사용자가 없을 때
                               (Missing or invalid token, or unknown user)
        """
        if not access_token:
            raise UnauthorizedError("Unauthorized request", reason="missing")

        try:
            claims: dict = self.tokens.verify_access_token(access_token)
            user_id: UUID = UUID(claims["sub"])
        except TokenError as exc:
            logger.info("access_rejected", reason=exc.kind.value)
            raise UnauthorizedError("Invalid access token", reason=exc.kind.value)
        except ValueError:
            logger.info("access_rejected", reason="malformed")
            raise UnauthorizedError("Invalid access token", reason="malformed")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            logger.info("access_rejected", reason="unknown_identity", user_id=str(user_id))
            raise UnauthorizedError("Invalid access token", reason="unknown_identity")
        return user


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService(jwt_manager)
