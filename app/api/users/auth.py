"""사용자 인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 비밀번호 변경.

User Auth Router — Registration, login, token refresh, logout and
password change endpoints.
Tokens travel as httpOnly, secure cookies and are echoed in the body.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Cookie, Depends, File, Form, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenResponse,
)
from app.schemas.common import ApiResponse
from app.schemas.user import UserResponse
from app.services.auth_service import auth_service
from app.services.storage_service import MediaFile

router: APIRouter = APIRouter()

ACCESS_COOKIE: str = "accessToken"
REFRESH_COOKIE: str = "refreshToken"


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(ACCESS_COOKIE, access_token, httponly=True, secure=True)
    response.set_cookie(REFRESH_COOKIE, refresh_token, httponly=True, secure=True)


def _clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, httponly=True, secure=True)
    response.delete_cookie(REFRESH_COOKIE, httponly=True, secure=True)


async def read_upload(upload: UploadFile | None) -> MediaFile | None:
    """업로드 파일을 메모리로 읽습니다 (Read an UploadFile into a MediaFile)."""
    if upload is None:
        return None
    data: bytes = await upload.read()
    return MediaFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=201)
async def register(
    db: Annotated[AsyncSession, Depends(get_db)],
    full_name: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    username: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    avatar: Annotated[UploadFile | None, File()] = None,
    cover_image: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse[UserResponse]:
    """회원가입 — 아바타 필수, 커버 이미지 선택.

    Register a new user. Multipart form with a required avatar file.
    """
    user: UserResponse = await auth_service.register(
        db,
        full_name=full_name,
        email=email,
        username=username,
        password=password,
        avatar=await read_upload(avatar),
        cover_image=await read_upload(cover_image),
    )
    await db.commit()
    return ApiResponse(status_code=201, data=user, message="User registered successfully")


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[LoginResponse]:
    """로그인 — 사용자명 또는 이메일과 비밀번호.

    Login endpoint. Sets accessToken/refreshToken cookies.
    """
    result: LoginResponse = await auth_service.login(db, data)
    await db.commit()
    _set_auth_cookies(response, result.access_token, result.refresh_token)
    return ApiResponse(status_code=200, data=result, message="User logged in successfully")


@router.post("/logout", response_model=ApiResponse[dict[str, Any]])
async def logout(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[dict[str, Any]]:
    """로그아웃 — 리프레시 토큰 폐기 및 쿠키 삭제.

    Logout endpoint. Revokes the stored refresh token and clears cookies.
    """
    await auth_service.logout(db, current_user)
    await db.commit()
    _clear_auth_cookies(response)
    return ApiResponse(status_code=200, data={}, message="User logged out")


@router.post("/refresh-token", response_model=ApiResponse[TokenResponse])
async def refresh_access_token(
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_COOKIE)] = None,
) -> ApiResponse[TokenResponse]:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh endpoint. Reads the refreshToken cookie, falling back to the
    JSON body, and rotates the pair.
    """
    presented: str | None = refresh_cookie or (data.refresh_token if data is not None else None)
    pair: TokenResponse = await auth_service.refresh(db, presented)
    await db.commit()
    _set_auth_cookies(response, pair.access_token, pair.refresh_token)
    return ApiResponse(status_code=200, data=pair, message="Access token refreshed")


@router.post("/change-password", response_model=ApiResponse[dict[str, Any]])
async def change_password(
    data: ChangePasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[dict[str, Any]]:
    """비밀번호 변경.

    Change the current user's password.
    """
    await auth_service.change_password(db, current_user, data)
    await db.commit()
    return ApiResponse(status_code=200, data={}, message="Password changed successfully")
