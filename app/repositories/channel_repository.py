"""채널 레포지토리 — 구독자 집계 및 시청 기록 쿼리.

Channel Repository — Subscriber aggregation and watch history queries.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import Select, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.subscription import Subscription
from app.models.user import User
from app.models.video import Video, WatchHistory


@dataclass
class ChannelStats:
    """채널 집계 결과 (Channel aggregation result)."""

    user: User
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class ChannelRepository:
    """채널 집계 쿼리를 담당하는 레포지토리.

    Repository for channel statistics and watch history.
    """

    async def get_channel_stats(
        self,
        db: AsyncSession,
        username: str,
        viewer_id: UUID | None,
    ) -> ChannelStats | None:
        """사용자명으로 채널 통계를 조회합니다.

        Load a channel by username together with its subscriber count,
        the number of channels it subscribes to, and whether the viewer
        subscribes to it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 채널 사용자명 (Channel username, case-insensitive)
            viewer_id: 조회하는 사용자 ID (Viewing user UUID, optional)

        Returns:
            ChannelStats | None: 채널 통계 또는 None (Stats, or None if no such channel)
        """
        subscribers_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        is_subscribed = exists().where(
            Subscription.channel_id == User.id,
            Subscription.subscriber_id == viewer_id,
        )

        query: Select = select(
            User,
            subscribers_count.label("subscribers_count"),
            subscribed_to_count.label("channels_subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
        ).where(User.username == username.strip().lower())

        row = (await db.execute(query)).first()
        if row is None:
            return None

        return ChannelStats(
            user=row[0],
            subscribers_count=int(row[1] or 0),
            channels_subscribed_to_count=int(row[2] or 0),
            is_subscribed=bool(row[3]) if viewer_id is not None else False,
        )

    async def get_watch_history(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> list[Video]:
        """사용자의 시청 기록을 최신순으로 조회합니다.

        Return the videos a user watched, newest first, with owners loaded.
        """
        query: Select = (
            select(WatchHistory)
            .options(selectinload(WatchHistory.video).selectinload(Video.owner))
            .where(WatchHistory.user_id == user_id)
            .order_by(WatchHistory.watched_at.desc())
        )
        result = await db.execute(query)
        return [entry.video for entry in result.scalars().all()]


# 싱글턴 인스턴스 — Singleton instance
channel_repository: ChannelRepository = ChannelRepository()
