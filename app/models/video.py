"""영상 및 시청 기록 모델.

Video and watch history models.

Tables:
    - videos: 업로드된 영상 (Uploaded videos)
    - watch_history: 사용자별 시청 기록 (Per-user watch history entries)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Video(Base):
    """영상 모델.

    Video model — A video published on an owner's channel.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        owner_id: 업로더 사용자 FK (Owner user foreign key)
        title: 제목 (Title)
        description: 설명 (Description)
        video_file: 영상 파일 URL (Video file URL)
        thumbnail: 썸네일 URL (Thumbnail URL)
        duration: 재생 시간(초) (Duration in seconds)
        views: 조회수 (View count)
        is_published: 공개 여부 (Published flag)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "videos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    video_file: Mapped[str] = mapped_column(String(1024), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(1024), nullable=False)
    duration: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    owner = relationship("User", back_populates="videos")


class WatchHistory(Base):
    """시청 기록 모델.

    Watch history entry — One row per (user, video) view, ordered by watched_at.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 시청자 사용자 FK (Viewer user foreign key)
        video_id: 시청한 영상 FK (Watched video foreign key)
        watched_at: 시청 일시 (Watch timestamp)
    """

    __tablename__ = "watch_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    watched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    video = relationship("Video")
