"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
A user is both a login identity and a video channel.

Tables:
    - users: 사용자 계정 (User accounts with a single refresh token slot)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Username and email are globally unique and stored in lower case.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, lower case, unique)
        email: 이메일 (Email address, lower case, unique)
        full_name: 실명 (Full display name)
        avatar: 아바타 이미지 URL (Avatar image URL)
        cover_image: 커버 이미지 URL (Cover image URL, may be empty)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        refresh_token: 현재 유효한 리프레시 토큰 (Current refresh token, single slot)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        videos: 업로드한 영상 목록 (Videos owned by this user)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username (소문자로 저장, stored lower case)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    # 이메일 — Email address (소문자로 저장, stored lower case)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 아바타 URL — Avatar image reference (외부 스토리지, external storage)
    avatar: Mapped[str] = mapped_column(String(1024), nullable=False)
    # 커버 이미지 URL — Cover image reference (선택, optional)
    cover_image: Mapped[str] = mapped_column(String(1024), default="", nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 리프레시 토큰 — 한 번에 하나만 유효 (At most one live refresh token per user)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    videos = relationship("Video", back_populates="owner", cascade="all, delete-orphan")
