"""Trending score computation and trending queries."""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.models import ArticleStatsModel
from database.repositories.article_repo import ArticleRepository
from database.repositories.stats_repo import StatsRepository
from shared.errors import StoreError
from shared.utils import ensure_utc, get_utc_now

logger = logging.getLogger(__name__)

VIEW_WEIGHT = 1
LIKE_WEIGHT = 3
RECENCY_WINDOW_HOURS = 10.0


def calculate_trending_score(
    views: int,
    likes: int,
    last_viewed: Optional[datetime],
    now: datetime
) -> float:
    """
    Score an article by engagement and how recently it was viewed.

    score = views * 1 + likes * 3 + max(0, 10 - hours since last view)

    The recency bonus decays linearly from 10 to 0 over ten hours. A
    last_viewed in the future (clock skew) counts as zero hours elapsed.
    """
    if last_viewed is None:
        hours_since = 0.0
    else:
        elapsed = (ensure_utc(now) - ensure_utc(last_viewed)).total_seconds()
        hours_since = max(0.0, elapsed / 3600)

    recency_factor = max(0.0, RECENCY_WINDOW_HOURS - hours_since)
    return float(views * VIEW_WEIGHT + likes * LIKE_WEIGHT + recency_factor)


def score_stats(stats: Dict[str, Any], now: datetime) -> float:
    """Trending score for a stats document."""
    return calculate_trending_score(
        stats.get("views", 0),
        stats.get("likes", 0),
        stats.get("last_viewed"),
        now
    )


class TrendingService:
    """Service for refreshing and querying trending scores."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        clock: Callable[[], datetime] = get_utc_now
    ):
        self.article_repo = ArticleRepository(db)
        self.stats_repo = StatsRepository(db)
        self.clock = clock

    async def refresh_scores(self) -> int:
        """Recompute the trending score of every stats record."""
        now = self.clock()
        updated = 0
        try:
            async for stats in self.stats_repo.iter_stats():
                await self.stats_repo.set_trending_score(
                    stats["article_id"],
                    score_stats(stats, now)
                )
                updated += 1
        except PyMongoError as e:
            raise StoreError.wrap("Error updating trending scores", e) from e

        logger.info(f"Updated trending scores for {updated} articles")
        return updated

    async def get_trending(self, limit: int) -> List[Dict[str, Any]]:
        """
        Get the top articles by trending score.

        Returns article documents in score order, each with ``views`` and
        ``trending_score`` added. Stats whose article is gone are skipped.
        """
        try:
            top_stats = await self.stats_repo.get_top_trending(limit)
            articles = await self.article_repo.get_articles_by_ids(
                [stats["article_id"] for stats in top_stats]
            )
        except PyMongoError as e:
            raise StoreError.wrap("Error fetching trending articles", e) from e

        articles_by_id = {article["_id"]: article for article in articles}
        trending = []
        for stats in top_stats:
            article = articles_by_id.get(stats["article_id"])
            if article is None:
                continue
            trending.append({
                **article,
                "views": stats.get("views", 0),
                "trending_score": stats.get("trending_score", 0.0)
            })
        return trending

    async def get_article_stats(self, article_id: str) -> Dict[str, Any]:
        """Get an article's counters, zeroed when it has no stats yet."""
        try:
            stats = await self.stats_repo.get_stats(article_id)
        except PyMongoError as e:
            raise StoreError.wrap("Error fetching article stats", e) from e

        if not stats:
            return {"views": 0, "likes": 0, "trending_score": 0.0, "last_viewed": None}

        return ArticleStatsModel.model_validate(stats).model_dump(
            include={"views", "likes", "trending_score", "last_viewed"}
        )
