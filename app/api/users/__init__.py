"""사용자 API 라우터 패키지 — 모든 사용자 엔드포인트 통합.

User API Router package — Aggregates all user-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - auth: 회원가입, 로그인, 로그아웃, 토큰 갱신, 비밀번호 변경
            (Registration, login, logout, refresh, password change)
    - profile: 내 정보 및 계정/미디어 수정 (Current user, account and media)
    - channels: 채널 프로필 및 시청 기록 (Channel profile and watch history)
"""

from fastapi import APIRouter

from app.api.users.auth import router as auth_router
from app.api.users.profile import router as profile_router
from app.api.users.channels import router as channels_router

users_router: APIRouter = APIRouter()

users_router.include_router(auth_router, tags=["Auth"])
users_router.include_router(profile_router, tags=["Profile"])
users_router.include_router(channels_router, tags=["Channels"])
