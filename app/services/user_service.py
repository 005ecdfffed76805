"""사용자 서비스 — 계정 정보, 미디어, 채널 프로필, 시청 기록.

User Service — Business logic for account details, avatar/cover media,
channel profiles and watch history of the current user.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.models.video import Video
from app.repositories.channel_repository import ChannelStats, channel_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import (
    AccountUpdate,
    ChannelProfileResponse,
    UserResponse,
    VideoOwner,
    WatchHistoryItem,
)
from app.services.storage_service import MediaFile, StorageError, storage_service
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError


def to_user_response(user: User) -> UserResponse:
    """사용자 모델을 비밀정보가 제거된 응답으로 변환합니다.

    Convert a User model into the redacted view (no password hash, no
    refresh token).
    """
    return UserResponse(
        id=str(user.id),
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        avatar=user.avatar,
        cover_image=user.cover_image or "",
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserService:
    """사용자 계정 관련 비즈니스 로직을 처리하는 서비스.

    Service handling self-service account operations.
    """

    async def update_account(
        self,
        db: AsyncSession,
        current_user: User,
        data: AccountUpdate,
    ) -> UserResponse:
        """현재 사용자의 이름과 이메일을 수정합니다.

        Update the current user's full name and email. Both are required.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 인증된 사용자 모델 (Authenticated user model)
            data: 수정 데이터 (Update data)

        Returns:
            UserResponse: 수정된 사용자 정보 (Updated user view)

        Raises:
            BadRequestError: 필드가 비어 있을 때 (A field is blank)
            DuplicateError: 다른 사용자가 이메일을 사용 중일 때 (Email taken)
        """
        full_name: str = data.full_name.strip()
        email: str = data.email.strip().lower()
        if not full_name or not email:
            raise BadRequestError("All fields are required")

        if await user_repository.email_taken(db, email, exclude_user_id=current_user.id):
            raise DuplicateError("User with this email already exists")

        try:
            user: User | None = await user_repository.update(
                db, current_user.id, {"full_name": full_name, "email": email}
            )
        except IntegrityError:
            # 동시 수정 경쟁 — Unique constraint hit by a concurrent update
            raise DuplicateError("User with this email already exists")
        if user is None:
            raise NotFoundError("User does not exist")
        return to_user_response(user)

    async def _replace_media(
        self,
        db: AsyncSession,
        current_user: User,
        file: MediaFile | None,
        field: str,
        folder: str,
        label: str,
    ) -> UserResponse:
        if file is None or not file.data:
            raise BadRequestError(f"{label} file is missing")
        try:
            url: str = storage_service.upload(file, folder)
        except StorageError:
            raise BadRequestError(f"Error while uploading {label.lower()}")

        user: User | None = await user_repository.update(db, current_user.id, {field: url})
        if user is None:
            raise NotFoundError("User does not exist")
        return to_user_response(user)

    async def update_avatar(
        self,
        db: AsyncSession,
        current_user: User,
        file: MediaFile | None,
    ) -> UserResponse:
        """아바타 이미지를 업로드하고 URL을 교체합니다 (Upload and replace the avatar)."""
        return await self._replace_media(db, current_user, file, "avatar", "avatars", "Avatar")

    async def update_cover_image(
        self,
        db: AsyncSession,
        current_user: User,
        file: MediaFile | None,
    ) -> UserResponse:
        """커버 이미지를 업로드하고 URL을 교체합니다 (Upload and replace the cover image)."""
        return await self._replace_media(db, current_user, file, "cover_image", "covers", "Cover image")

    async def get_channel_profile(
        self,
        db: AsyncSession,
        username: str,
        viewer: User,
    ) -> ChannelProfileResponse:
        """채널 프로필을 구독 통계와 함께 조회합니다.

        Return a channel's profile with its subscription aggregates.

        Raises:
            BadRequestError: 사용자명이 비어 있을 때 (Blank username)
            NotFoundError: 채널이 없을 때 (Channel does not exist)
        """
        if not username.strip():
            raise BadRequestError("username is missing")

        stats: ChannelStats | None = await channel_repository.get_channel_stats(
            db, username, viewer.id
        )
        if stats is None:
            raise NotFoundError("Channel does not exist")

        channel: User = stats.user
        return ChannelProfileResponse(
            id=str(channel.id),
            username=channel.username,
            email=channel.email,
            full_name=channel.full_name,
            avatar=channel.avatar,
            cover_image=channel.cover_image or "",
            subscribers_count=stats.subscribers_count,
            channels_subscribed_to_count=stats.channels_subscribed_to_count,
            is_subscribed=stats.is_subscribed,
        )

    async def get_watch_history(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[WatchHistoryItem]:
        """현재 사용자의 시청 기록을 반환합니다 (Return the current user's watch history)."""
        videos: list[Video] = await channel_repository.get_watch_history(db, current_user.id)
        return [
            WatchHistoryItem(
                id=str(video.id),
                title=video.title,
                description=video.description,
                video_file=video.video_file,
                thumbnail=video.thumbnail,
                duration=video.duration,
                views=video.views,
                owner=VideoOwner.model_validate(video.owner),
            )
            for video in videos
        ]


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
