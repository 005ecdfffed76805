"""초기 데이터 시드 스크립트 — 테이블 생성 및 데모 계정 생성.

Seed script — Creates tables and a demo user.
Run this script once to bootstrap a development database.

Usage:
    python -m app.seed

Creates:
    - 1개 데모 계정: neo / neo@x.io / p@ss1 (1 demo user)
"""

import asyncio

from sqlalchemy import select

from app.config import settings
from app.database import async_session, engine, Base
from app.models import User
from app.utils.logging import configure_logging, get_logger
from app.utils.password import hash_password

logger = get_logger("seed")


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with a demo user.
    Creates tables if they don't exist.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(User).where(User.username == "neo"))
        if result.scalar_one_or_none():
            logger.info("seed_skipped", reason="already_seeded")
            return

        demo: User = User(
            username="neo",
            email="neo@x.io",
            full_name="Thomas Anderson",
            avatar=f"{settings.PUBLIC_BASE_URL}/uploads/avatars/neo.png",
            password_hash=hash_password("p@ss1"),
        )
        db.add(demo)
        await db.commit()
        logger.info("seed_completed", user_id=str(demo.id), username=demo.username)


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())
