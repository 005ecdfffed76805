"""사용자 레포지토리 — 사용자 조회 및 세션 토큰 슬롯 관리.

User Repository — User lookup and the single refresh-token slot.
This is the store adapter the session lifecycle depends on:

    get_by_id(id)                              -> User | None
    get_by_username_or_email(username, email)  -> User | None
    set_refresh_token(id, token, expected=...) -> bool | NotFoundError
    set_password_hash(id, hash)                -> None | NotFoundError

set_refresh_token() with an ``expected`` value is a compare-and-swap:
a single UPDATE whose WHERE clause also matches the previous token, so
two concurrent rotations of the same token cannot both succeed.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import Select, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository
from app.utils.exceptions import NotFoundError

# 기대값 미지정 표시 — Sentinel meaning "overwrite unconditionally"
_UNSET: Any = object()


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    Username and email arguments are lower-cased before comparison.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_username_or_email(
        self,
        db: AsyncSession,
        username: str | None,
        email: str | None,
    ) -> User | None:
        """사용자명 또는 이메일로 사용자를 조회합니다.

        Retrieve a user whose username OR email matches. Blank arguments are
        ignored. If several rows match, the oldest record wins.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 사용자명 (Username, optional)
            email: 이메일 (Email, optional)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        conditions: list = []
        if username and username.strip():
            conditions.append(User.username == username.strip().lower())
        if email and email.strip():
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None

        query: Select = (
            select(User)
            .where(or_(*conditions))
            .order_by(User.created_at, User.id)
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def email_taken(
        self,
        db: AsyncSession,
        email: str,
        exclude_user_id: UUID | None = None,
    ) -> bool:
        """다른 사용자가 이미 이메일을 사용 중인지 확인합니다.

        Check whether another user already owns the email.
        """
        query: Select = select(User.id).where(User.email == email.strip().lower())
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def set_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str | None,
        expected: str | None = _UNSET,
    ) -> bool:
        """사용자의 리프레시 토큰 슬롯을 교체합니다.

        Replace the user's refresh token slot. With ``expected`` the update
        only applies while the slot still holds that value.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 대상 사용자 ID (Target user UUID)
            token: 새 토큰, None이면 슬롯 비움 (New token; None clears the slot)
            expected: 현재 저장되어 있어야 하는 값 (Value the slot must still hold)

        Returns:
            bool: 교체 여부 — 기대값 불일치 시 False (False on compare mismatch)

        Raises:
            NotFoundError: 사용자가 없을 때 (User does not exist)
        """
        stmt = update(User).where(User.id == user_id)
        if expected is not _UNSET:
            if expected is None:
                stmt = stmt.where(User.refresh_token.is_(None))
            else:
                stmt = stmt.where(User.refresh_token == expected)
        stmt = stmt.values(refresh_token=token)

        result = await db.execute(stmt)
        if result.rowcount == 0:
            if not await self.exists(db, {"id": user_id}):
                raise NotFoundError("User does not exist")
            return False
        return True

    async def set_password_hash(
        self,
        db: AsyncSession,
        user_id: UUID,
        password_hash: str,
    ) -> None:
        """사용자의 비밀번호 해시를 교체합니다.

        Replace the user's password hash.

        Raises:
            NotFoundError: 사용자가 없을 때 (User does not exist)
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash)
        )
        result = await db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("User does not exist")


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
