"""요청 로깅 미들웨어 테스트 — 마스킹 및 에러 응답 재구성.

Request logging middleware tests — body masking and the rebuilt error
response keeping every header.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from app.middleware.request_logging import RequestLoggingMiddleware, mask_sensitive


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.post("/fail")
    async def fail() -> JSONResponse:
        response = JSONResponse(
            {"status_code": 400, "message": "nope", "success": False},
            status_code=400,
        )
        response.set_cookie("accessToken", "", httponly=True, secure=True)
        response.set_cookie("refreshToken", "", httponly=True, secure=True)
        return response

    return app


def test_mask_sensitive():
    masked = mask_sensitive({"username": "neo", "password": "p@ss1", "nested": {"refresh_token": "x"}})
    assert masked == {"username": "neo", "password": "***", "nested": {"refresh_token": "***"}}


async def test_error_response_keeps_repeated_headers():
    """에러 응답을 다시 감쌀 때 set-cookie 헤더가 모두 유지됨."""
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        res = await client.post("/fail", json={"password": "p@ss1"})

    assert res.status_code == 400
    assert res.json()["message"] == "nope"
    cookies = res.headers.get_list("set-cookie")
    assert len(cookies) == 2
    assert any(c.startswith("accessToken=") for c in cookies)
    assert any(c.startswith("refreshToken=") for c in cookies)
