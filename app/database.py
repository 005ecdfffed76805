"""데이터베이스 엔진 및 세션 설정 모듈.

Async engine and session factory for the users / channels store.
The refresh token slot lives in the users table, so every session
lifecycle request goes through a session yielded by get_db().
Tests replace get_db with an aiosqlite session.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

# 비동기 엔진 — asyncpg in production; DEBUG echoes SQL
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# 세션 팩토리 — expire_on_commit=False keeps the current user readable after commit
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """ORM 베이스 (Declarative base for users, subscriptions, videos, watch history)."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 DB 세션 (Request-scoped session).

    Routers commit explicitly after the service call; anything not
    committed is rolled back when the session closes.
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
