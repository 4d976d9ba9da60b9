"""View recording for article stats."""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.services.trending import score_stats
from database.repositories.stats_repo import StatsRepository
from shared.errors import StoreError
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


class ViewRecorder:
    """Records article views and keeps the trending score current."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        clock: Callable[[], datetime] = get_utc_now
    ):
        self.stats_repo = StatsRepository(db)
        self.clock = clock

    async def record_view(
        self,
        article_id: str,
        visitor_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Record a view of an article.

        - Creates the stats record on first view
        - A visitor ID is counted at most once per article, for the
          lifetime of the stats record
        - Views without a visitor ID are always counted
        - last_viewed and the trending score are refreshed on every call

        Returns the views, likes and trending score after the update.
        """
        now = self.clock()
        try:
            await self.stats_repo.ensure_stats(article_id, now)

            if visitor_id:
                stats = await self.stats_repo.record_unique_view(article_id, visitor_id, now)
                if stats is None:
                    logger.debug(f"Repeat view of {article_id} by {visitor_id}")
                    stats = await self.stats_repo.touch(article_id, now)
            else:
                stats = await self.stats_repo.record_anonymous_view(article_id, now)

            if stats is None:
                # Reaped between the upsert and the update
                raise StoreError(f"Stats for article {article_id} disappeared while recording view")

            stats = await self.stats_repo.set_trending_score(article_id, score_stats(stats, now)) or stats
        except PyMongoError as e:
            raise StoreError.wrap("Error recording article view", e) from e

        return {
            "views": stats.get("views", 0),
            "likes": stats.get("likes", 0),
            "trending_score": stats.get("trending_score", 0.0)
        }
