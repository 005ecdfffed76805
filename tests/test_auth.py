"""세션 API 테스트 — 로그인, 토큰 갱신, 로그아웃, 비밀번호 변경.

Session API tests — login, refresh rotation, logout and password change
over HTTP. Cookies are marked Secure, so the http:// test client never
sends them back; tokens are passed in the body or the Bearer header.
"""

from httpx import AsyncClient

from tests.conftest import USERS, auth_header, login


class TestLogin:
    """로그인 API 테스트."""

    async def test_login_by_username(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/login", json={"username": "neo", "password": "p@ss1"})
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "User logged in successfully"
        assert body["data"]["access_token"]
        assert body["data"]["refresh_token"]
        assert body["data"]["user"]["username"] == "neo"

    async def test_login_by_email(self, client: AsyncClient, neo):
        data = await login(client, email="neo@x.io")
        assert data["user"]["email"] == "neo@x.io"

    async def test_login_sets_secure_http_only_cookies(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/login", json={"username": "neo", "password": "p@ss1"})
        cookies = res.headers.get_list("set-cookie")
        assert any(c.startswith("accessToken=") for c in cookies)
        assert any(c.startswith("refreshToken=") for c in cookies)
        for cookie in cookies:
            assert "HttpOnly" in cookie
            assert "Secure" in cookie

    async def test_login_redacts_user(self, client: AsyncClient, neo):
        data = await login(client)
        assert "password_hash" not in data["user"]
        assert "refresh_token" not in data["user"]

    async def test_missing_identity(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/login", json={"password": "p@ss1"})
        assert res.status_code == 400
        assert res.json() == {
            "status_code": 400,
            "message": "username or email is required",
            "success": False,
        }

    async def test_unknown_user(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/login", json={"username": "smith", "password": "p@ss1"})
        assert res.status_code == 404
        assert res.json()["message"] == "User does not exist"

    async def test_wrong_password(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/login", json={"username": "neo", "password": "nope"})
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid user credentials"
        assert "set-cookie" not in res.headers
        assert neo.refresh_token is None

    async def test_second_login_replaces_session(self, client: AsyncClient, neo):
        first = await login(client)
        await login(client)
        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": first["refresh_token"]})
        assert res.status_code == 401


class TestRefresh:
    """토큰 갱신 API 테스트."""

    async def test_session_lifecycle(self, client: AsyncClient, neo):
        """로그인 → 갱신 → 재사용 거부 → 로그아웃 → 갱신 거부."""
        first = await login(client)

        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": first["refresh_token"]})
        assert res.status_code == 200
        assert res.json()["message"] == "Access token refreshed"
        second = res.json()["data"]
        assert second["refresh_token"] != first["refresh_token"]

        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": first["refresh_token"]})
        assert res.status_code == 401
        assert res.json()["message"] == "Refresh token is expired or used"

        res = await client.post(f"{USERS}/logout", headers=auth_header(second["access_token"]))
        assert res.status_code == 200

        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": second["refresh_token"]})
        assert res.status_code == 401

    async def test_rotated_access_token_works(self, client: AsyncClient, neo):
        first = await login(client)
        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": first["refresh_token"]})
        access = res.json()["data"]["access_token"]
        res = await client.get(f"{USERS}/current-user", headers=auth_header(access))
        assert res.status_code == 200

    async def test_missing_refresh_token(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/refresh-token")
        assert res.status_code == 401
        assert res.json()["message"] == "Unauthorized request"

    async def test_access_token_as_refresh_token(self, client: AsyncClient, neo):
        first = await login(client)
        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": first["access_token"]})
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid refresh token"

    async def test_garbage_refresh_token(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": "invalid.token.here"})
        assert res.status_code == 401

    async def test_failure_envelope_hides_reason(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": "invalid.token.here"})
        body = res.json()
        assert set(body) == {"status_code", "message", "success"}
        assert "malformed" not in res.text


class TestLogout:
    """로그아웃 API 테스트."""

    async def test_logout(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.post(f"{USERS}/logout", headers=auth_header(data["access_token"]))
        assert res.status_code == 200
        body = res.json()
        assert body["data"] == {}
        assert body["message"] == "User logged out"
        assert neo.refresh_token is None

    async def test_logout_is_idempotent(self, client: AsyncClient, neo):
        data = await login(client)
        headers = auth_header(data["access_token"])
        assert (await client.post(f"{USERS}/logout", headers=headers)).status_code == 200
        assert (await client.post(f"{USERS}/logout", headers=headers)).status_code == 200

    async def test_logout_requires_auth(self, client: AsyncClient, neo):
        res = await client.post(f"{USERS}/logout")
        assert res.status_code == 401

    async def test_logout_with_refresh_token_rejected(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.post(f"{USERS}/logout", headers=auth_header(data["refresh_token"]))
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid access token"


class TestChangePassword:
    """비밀번호 변경 API 테스트."""

    async def test_change_password(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.post(
            f"{USERS}/change-password",
            json={"old_password": "p@ss1", "new_password": "n3w-pass"},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 200
        assert res.json()["message"] == "Password changed successfully"

        res = await client.post(f"{USERS}/login", json={"username": "neo", "password": "p@ss1"})
        assert res.status_code == 401
        await login(client, password="n3w-pass")

    async def test_existing_session_survives(self, client: AsyncClient, neo):
        data = await login(client)
        await client.post(
            f"{USERS}/change-password",
            json={"old_password": "p@ss1", "new_password": "n3w-pass"},
            headers=auth_header(data["access_token"]),
        )
        res = await client.post(f"{USERS}/refresh-token", json={"refresh_token": data["refresh_token"]})
        assert res.status_code == 200

    async def test_wrong_old_password(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.post(
            f"{USERS}/change-password",
            json={"old_password": "nope", "new_password": "n3w-pass"},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid old password"
        await login(client)

    async def test_over_long_new_password(self, client: AsyncClient, neo):
        """72바이트를 넘는 새 비밀번호는 400, 기존 비밀번호 유지."""
        data = await login(client)
        res = await client.post(
            f"{USERS}/change-password",
            json={"old_password": "p@ss1", "new_password": "n" * 80},
            headers=auth_header(data["access_token"]),
        )
        assert res.status_code == 400
        assert res.json() == {
            "status_code": 400,
            "message": "Password must be at most 72 bytes",
            "success": False,
        }
        await login(client)

    async def test_requires_auth(self, client: AsyncClient, neo):
        res = await client.post(
            f"{USERS}/change-password",
            json={"old_password": "p@ss1", "new_password": "n3w-pass"},
        )
        assert res.status_code == 401


class TestCurrentUser:
    """현재 사용자 API 테스트."""

    async def test_current_user(self, client: AsyncClient, neo):
        data = await login(client)
        res = await client.get(f"{USERS}/current-user", headers=auth_header(data["access_token"]))
        assert res.status_code == 200
        user = res.json()["data"]
        assert user["id"] == str(neo.id)
        assert "password_hash" not in user
        assert "refresh_token" not in user

    async def test_malformed_bearer(self, client: AsyncClient, neo):
        res = await client.get(f"{USERS}/current-user", headers=auth_header("garbage"))
        assert res.status_code == 401


async def test_health(client: AsyncClient):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
