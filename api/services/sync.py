"""Synchronization of article like counts into article stats."""
import logging
from datetime import datetime
from typing import Callable
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.services.trending import TrendingService
from database.repositories.article_repo import ArticleRepository
from database.repositories.stats_repo import StatsRepository
from shared.errors import StoreError
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


class LikeSynchronizer:
    """Copies Article.like_count into ArticleStats.likes."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        clock: Callable[[], datetime] = get_utc_now
    ):
        self.article_repo = ArticleRepository(db)
        self.stats_repo = StatsRepository(db)
        self.trending = TrendingService(db, clock=clock)
        self.clock = clock

    async def sync_likes(self) -> int:
        """Upsert every article's like count into its stats record."""
        now = self.clock()
        try:
            articles = await self.article_repo.list_like_counts()
            for article in articles:
                await self.stats_repo.upsert_likes(
                    article["_id"],
                    article.get("like_count", 0),
                    now
                )
        except PyMongoError as e:
            raise StoreError.wrap("Error syncing article likes", e) from e

        logger.info(f"Synced likes for {len(articles)} articles")
        return len(articles)

    async def sync_all(self) -> int:
        """
        Sync likes, then recompute every trending score.

        Scores are recomputed only after all likes are written so each one
        reflects the synced count. Returns the number of articles processed.
        """
        count = await self.sync_likes()
        await self.trending.refresh_scores()
        return count
