"""Removal of stats records whose article no longer exists."""
import logging
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from database.repositories.article_repo import ArticleRepository
from database.repositories.stats_repo import StatsRepository
from shared.errors import StoreError

logger = logging.getLogger(__name__)


class StatsReaper:
    """Deletes orphaned article stats."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.article_repo = ArticleRepository(db)
        self.stats_repo = StatsRepository(db)

    async def reap(self) -> int:
        """Delete stats records referencing missing articles. Returns the count deleted."""
        try:
            refs = await self.stats_repo.list_article_refs()
            existing = await self.article_repo.get_existing_ids(
                {ref["article_id"] for ref in refs}
            )
            orphan_ids = [ref["_id"] for ref in refs if ref["article_id"] not in existing]
            deleted = await self.stats_repo.delete_stats(orphan_ids)
        except PyMongoError as e:
            raise StoreError.wrap("Error cleaning up article stats", e) from e

        logger.info(f"Cleaned up {deleted} orphaned stats entries")
        return deleted
