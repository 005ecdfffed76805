"""사용자 프로필 라우터 — 내 정보, 계정 수정, 아바타/커버 이미지.

User Profile Router — Current user, account details and media endpoints.
Follows 3-layer architecture: Router → Service → Repository.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.api.users.auth import read_upload
from app.database import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import AccountUpdate, UserResponse
from app.services.user_service import to_user_response, user_service

router: APIRouter = APIRouter()


@router.get("/current-user", response_model=ApiResponse[UserResponse])
async def get_current_user_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[UserResponse]:
    """내 정보를 조회합니다.

    Get the current user.
    """
    return ApiResponse(
        status_code=200,
        data=to_user_response(current_user),
        message="Current user fetched successfully",
    )


@router.patch("/update-account", response_model=ApiResponse[UserResponse])
async def update_account(
    data: AccountUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[UserResponse]:
    """계정 정보를 수정합니다.

    Update the current user's full name and email.

    Args:
        data: 수정 데이터 (Update data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        ApiResponse[UserResponse]: 수정된 사용자 정보 (Updated user)
    """
    user: UserResponse = await user_service.update_account(db, current_user, data)
    await db.commit()
    return ApiResponse(status_code=200, data=user, message="Account details updated successfully")


@router.patch("/avatar", response_model=ApiResponse[UserResponse])
async def update_avatar(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    avatar: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse[UserResponse]:
    """아바타 이미지를 교체합니다 (Replace the avatar image)."""
    user: UserResponse = await user_service.update_avatar(
        db, current_user, await read_upload(avatar)
    )
    await db.commit()
    return ApiResponse(status_code=200, data=user, message="Avatar updated successfully")


@router.patch("/cover-image", response_model=ApiResponse[UserResponse])
async def update_cover_image(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    cover_image: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse[UserResponse]:
    """커버 이미지를 교체합니다 (Replace the cover image)."""
    user: UserResponse = await user_service.update_cover_image(
        db, current_user, await read_upload(cover_image)
    )
    await db.commit()
    return ApiResponse(status_code=200, data=user, message="Cover image updated successfully")
