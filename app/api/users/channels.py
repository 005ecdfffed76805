"""채널 라우터 — 채널 프로필 및 시청 기록.

Channel Router — Channel profile with subscription counts and the
current user's watch history.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import ChannelProfileResponse, WatchHistoryItem
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("/c/{username}", response_model=ApiResponse[ChannelProfileResponse])
async def get_channel_profile(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[ChannelProfileResponse]:
    """채널 프로필 조회 — 구독자 수, 구독 채널 수, 구독 여부.

    Get a channel profile with subscriber counts.
    """
    channel: ChannelProfileResponse = await user_service.get_channel_profile(
        db, username, current_user
    )
    return ApiResponse(status_code=200, data=channel, message="User channel fetched successfully")


@router.get("/history", response_model=ApiResponse[list[WatchHistoryItem]])
async def get_watch_history(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse[list[WatchHistoryItem]]:
    """내 시청 기록 조회 (Get the current user's watch history)."""
    history: list[WatchHistoryItem] = await user_service.get_watch_history(db, current_user)
    return ApiResponse(status_code=200, data=history, message="Watch history fetched successfully")
