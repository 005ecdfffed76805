"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database, session, and
httpx client fixtures. Each test gets a fresh database.
Token secrets are set in the environment before the app is imported.
"""

import os

os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config import settings  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import *  # noqa: F401,F403,E402 — register all models with metadata
from app.utils.password import hash_password  # noqa: E402

USERS = "/api/v1/users"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 인메모리 async 엔진. 매 테스트마다 스키마를 새로 만듭니다."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def local_uploads(tmp_path, monkeypatch):
    """업로드 파일을 임시 디렉토리에 저장하도록 설정합니다."""
    monkeypatch.setattr(settings, "LOCAL_UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
    return tmp_path / "uploads"


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(db: AsyncSession, username: str, email: str, password: str):
    """테스트 사용자를 생성합니다."""
    from app.models.user import User
    user = User(
        username=username,
        email=email,
        full_name=username.title(),
        avatar=f"http://localhost:8000/uploads/avatars/{username}.png",
        password_hash=hash_password(password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def neo(db: AsyncSession):
    """기본 테스트 사용자 neo를 생성합니다."""
    return await make_user(db, "neo", "neo@x.io", "p@ss1")


@pytest_asyncio.fixture
async def trinity(db: AsyncSession):
    """두 번째 테스트 사용자 trinity를 생성합니다."""
    return await make_user(db, "trinity", "trinity@x.io", "tr1n1ty")


async def login(client: AsyncClient, password: str = "p@ss1", **identity: str) -> dict:
    """로그인 후 응답 data를 반환합니다."""
    payload = {"password": password, **(identity or {"username": "neo"})}
    res = await client.post(f"{USERS}/login", json=payload)
    assert res.status_code == 200, res.text
    return res.json()["data"]


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
