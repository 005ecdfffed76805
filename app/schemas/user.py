"""사용자, 채널 및 시청 기록 관련 Pydantic 스키마 정의.

User, channel, and watch-history Pydantic schema definitions.
UserResponse is the redacted identity view: it never exposes the
password hash or the stored refresh token.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """사용자 응답 스키마 (비밀정보 제외).

    Redacted user view.

    Attributes:
        id: 사용자 UUID 문자열 (User UUID as string)
        username: 로그인 아이디 (Login username)
        email: 이메일 (Email)
        full_name: 실명 (Full display name)
        avatar: 아바타 URL (Avatar URL)
        cover_image: 커버 이미지 URL (Cover image URL)
        created_at: 생성 일시 (Creation timestamp)
        updated_at: 수정 일시 (Last update timestamp)
    """

    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    created_at: datetime
    updated_at: datetime


class AccountUpdate(BaseModel):
    """계정 정보 수정 요청 스키마.

    Account details update. Both fields are required and must be non-blank;
    the service enforces this so blanks map to 400.
    """

    full_name: str = ""
    email: str = ""


class ChannelProfileResponse(BaseModel):
    """채널 프로필 응답 스키마.

    Channel profile with subscription aggregates.

    Attributes:
        subscribers_count: 구독자 수 (Number of subscribers)
        channels_subscribed_to_count: 구독 중인 채널 수 (Channels this user follows)
        is_subscribed: 조회자가 구독 중인지 여부 (Whether the viewer subscribes)
    """

    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class VideoOwner(BaseModel):
    """영상 업로더 요약 (Video owner summary)."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    full_name: str
    avatar: str


class WatchHistoryItem(BaseModel):
    """시청 기록 항목 스키마 (Watch history entry)."""

    id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    owner: VideoOwner
