"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for table creation and
relationship resolution.

Modules:
    user: 사용자 계정 (User accounts)
    subscription: 채널 구독 (Channel subscriptions)
    video: 영상 및 시청 기록 (Videos and watch history)
"""

from app.models.user import User
from app.models.subscription import Subscription
from app.models.video import Video, WatchHistory

__all__ = [
    "User",
    "Subscription",
    "Video", "WatchHistory",
]
