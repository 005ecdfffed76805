"""사용자 API 테스트 — 회원가입, 계정 수정, 미디어, 채널, 시청 기록.

User API tests — registration, account details, media uploads, channel
profiles and watch history.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models import Subscription, Video, WatchHistory
from tests.conftest import USERS, auth_header, login

PNG: tuple[str, bytes, str] = ("me.png", b"\x89PNG\r\n\x1a\nfake", "image/png")


def _form(**overrides: str) -> dict[str, str]:
    form = {
        "full_name": "Morpheus",
        "email": "Morpheus@X.io",
        "username": "Morpheus",
        "password": "red-pill",
    }
    form.update(overrides)
    return form


class TestRegister:
    """회원가입 API 테스트."""

    async def test_register(self, client: AsyncClient, local_uploads):
        res = await client.post(
            f"{USERS}/register",
            data=_form(),
            files={"avatar": PNG, "cover_image": ("cover.jpg", b"jpeg-bytes", "image/jpeg")},
        )
        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "User registered successfully"
        user = body["data"]
        assert user["username"] == "morpheus"
        assert user["email"] == "morpheus@x.io"
        assert user["avatar"].startswith(f"{settings.PUBLIC_BASE_URL}/uploads/avatars/")
        assert user["avatar"].endswith(".png")
        assert user["cover_image"].endswith(".jpg")
        assert "password_hash" not in user
        assert any(local_uploads.rglob("*.png"))

    async def test_registered_user_can_login(self, client: AsyncClient):
        await client.post(f"{USERS}/register", data=_form(), files={"avatar": PNG})
        data = await login(client, password="red-pill", username="morpheus")
        assert data["user"]["cover_image"] == ""

    async def test_duplicate_username_is_case_insensitive(self, client: AsyncClient, neo):
        res = await client.post(
            f"{USERS}/register",
            data=_form(username="NEO", email="other@x.io"),
            files={"avatar": PNG},
        )
        assert res.status_code == 409
        assert res.json()["message"] == "User with email or username already exists"

    async def test_duplicate_email(self, client: AsyncClient, neo):
        res = await client.post(
            f"{USERS}/register",
            data=_form(email="NEO@x.io"),
            files={"avatar": PNG},
        )
        assert res.status_code == 409

    async def test_missing_avatar(self, client: AsyncClient):
        res = await client.post(f"{USERS}/register", data=_form())
        assert res.status_code == 400
        assert res.json()["message"] == "Avatar file is required"

    async def test_blank_field(self, client: AsyncClient):
        res = await client.post(
            f"{USERS}/register",
            data=_form(password="   "),
            files={"avatar": PNG},
        )
        assert res.status_code == 400
        assert res.json()["message"] == "All fields are required"

    async def test_over_long_password(self, client: AsyncClient, local_uploads):
        """72바이트 초과 비밀번호는 업로드 전에 400으로 거부."""
        res = await client.post(
            f"{USERS}/register",
            data=_form(password="p" * 80),
            files={"avatar": PNG},
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Password must be at most 72 bytes"
        assert not local_uploads.exists() or not any(local_uploads.rglob("*.*"))

    async def test_password_limit_counts_utf8_bytes(self, client: AsyncClient):
        """25자라도 UTF-8로 75바이트면 거부."""
        res = await client.post(
            f"{USERS}/register",
            data=_form(password="비" * 25),
            files={"avatar": PNG},
        )
        assert res.status_code == 400

    async def test_password_at_limit(self, client: AsyncClient):
        res = await client.post(
            f"{USERS}/register",
            data=_form(password="p" * 72),
            files={"avatar": PNG},
        )
        assert res.status_code == 201
        await login(client, password="p" * 72, username="morpheus")


class TestAccount:
    """계정 수정 API 테스트."""

    async def test_update_account(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.patch(
            f"{USERS}/update-account",
            json={"full_name": "Thomas Anderson", "email": "Thomas@X.io"},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 200
        user = res.json()["data"]
        assert user["full_name"] == "Thomas Anderson"
        assert user["email"] == "thomas@x.io"

    async def test_email_owned_by_other_user(self, client: AsyncClient, neo, trinity):
        data = await login(client)
        res = await client.patch(
            f"{USERS}/update-account",
            json={"full_name": "Neo", "email": "trinity@x.io"},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 409

    async def test_blank_fields(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.patch(
            f"{USERS}/update-account",
            json={"full_name": "Neo"},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 400
        assert res.json()["message"] == "All fields are required"

    async def test_update_avatar(self, client: AsyncClient, neo):
        data = await login(client)
        old_avatar = data["user"]["avatar"]
        res = await client.patch(
            f"{USERS}/avatar",
            files={"avatar": PNG},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 200
        assert res.json()["data"]["avatar"] != old_avatar

    async def test_update_cover_image(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.patch(
            f"{USERS}/cover-image",
            files={"cover_image": ("cover.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 200
        assert "/uploads/covers/" in res.json()["data"]["cover_image"]

    async def test_update_avatar_missing_file(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.patch(f"{USERS}/avatar", headers=auth_header(data["access_token"]))
        assert res.status_code == 400
        assert res.json()["message"] == "Avatar file is missing"


class TestChannel:
    """채널 프로필 및 시청 기록 API 테스트."""

    async def test_channel_profile(self, client: AsyncClient, db: AsyncSession, neo, trinity):
        db.add(Subscription(subscriber_id=trinity.id, channel_id=neo.id))
        await db.flush()

        data = await login(client, password="tr1n1ty", username="trinity")
        res = await client.get(f"{USERS}/c/NEO", headers=auth_header(data["access_token"]))
        assert res.status_code == 200
        channel = res.json()["data"]
        assert channel["username"] == "neo"
        assert channel["subscribers_count"] == 1
        assert channel["channels_subscribed_to_count"] == 0
        assert channel["is_subscribed"] is True

    async def test_own_channel_not_subscribed(self, client: AsyncClient, db: AsyncSession, neo, trinity):
        db.add(Subscription(subscriber_id=trinity.id, channel_id=neo.id))
        await db.flush()

        data = await login(client)
        res = await client.get(f"{USERS}/c/trinity", headers=auth_header(data["access_token"]))
        channel = res.json()["data"]
        assert channel["subscribers_count"] == 0
        assert channel["channels_subscribed_to_count"] == 1
        assert channel["is_subscribed"] is False

    async def test_unknown_channel(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.get(f"{USERS}/c/smith", headers=auth_header(data["access_token"]))
        assert res.status_code == 404
        assert res.json()["message"] == "Channel does not exist"

    async def test_watch_history_newest_first(self, client: AsyncClient, db: AsyncSession, neo, trinity):
        older = Video(owner_id=trinity.id, title="Follow the white rabbit", video_file="v1.mp4", thumbnail="t1.png")
        newer = Video(owner_id=trinity.id, title="Knock knock", video_file="v2.mp4", thumbnail="t2.png")
        db.add_all([older, newer])
        await db.flush()
        now = datetime.now(timezone.utc)
        db.add_all([
            WatchHistory(user_id=neo.id, video_id=older.id, watched_at=now - timedelta(hours=1)),
            WatchHistory(user_id=neo.id, video_id=newer.id, watched_at=now),
        ])
        await db.flush()

        data = await login(client)
        res = await client.get(f"{USERS}/history", headers=auth_header(data["access_token"]))
        assert res.status_code == 200
        history = res.json()["data"]
        assert [item["title"] for item in history] == ["Knock knock", "Follow the white rabbit"]
        assert history[0]["owner"]["username"] == "trinity"

    async def test_empty_watch_history(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.get(f"{USERS}/history", headers=auth_header(data["access_token"]))
        assert res.status_code == 200
        assert res.json()["data"] == []
