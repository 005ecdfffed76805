"""구독 모델 — 사용자 간 채널 구독 관계.

Subscription model — Channel subscription edges between users.
subscriber_id follows channel_id; both reference the users table.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Subscription(Base):
    """구독 테이블.

    Subscription table linking a subscriber to a channel.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        subscriber_id: 구독자 사용자 ID (Subscribing user UUID)
        channel_id: 채널 사용자 ID (Channel owner user UUID)
        created_at: 구독 일시 (Subscription timestamp)

    Constraints:
        uq_subscription_pair: 같은 채널 중복 구독 방지 (One subscription per pair)
    """

    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
    )
