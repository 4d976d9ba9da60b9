"""Stats repository for the ArticleStats collection.

Each stats record mirrors one article. ``likes`` is a copy of the article's
``like_count`` and may lag behind it until the next like sync.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any, AsyncIterator, Iterable
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
from shared.utils import generate_stats_id


class StatsRepository:
    """Repository for ArticleStats CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.article_stats

    @staticmethod
    def _insert_defaults(now: datetime) -> Dict[str, Any]:
        return {
            "_id": generate_stats_id(),
            "views": 0,
            "last_viewed": now,
            "trending_score": 0.0,
            "view_history": [],
            "unique_visitors": []
        }

    async def get_stats(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Get the stats record for an article."""
        return await self.collection.find_one({"article_id": article_id})

    async def ensure_stats(self, article_id: str, now: datetime) -> None:
        """Create an empty stats record for the article if none exists."""
        defaults = self._insert_defaults(now)
        defaults["likes"] = 0
        try:
            await self.collection.update_one(
                {"article_id": article_id},
                {"$setOnInsert": defaults},
                upsert=True
            )
        except DuplicateKeyError:
            # Concurrent upsert won the race; the record exists either way
            pass

    async def record_unique_view(
        self,
        article_id: str,
        visitor_id: str,
        now: datetime
    ) -> Optional[Dict[str, Any]]:
        """
        Count a view from a visitor not seen before for this article.

        The visitor check and the increment happen in one conditional
        update. Returns None when the visitor was already counted.
        """
        return await self.collection.find_one_and_update(
            {"article_id": article_id, "unique_visitors": {"$ne": visitor_id}},
            {
                "$addToSet": {"unique_visitors": visitor_id},
                "$inc": {"views": 1},
                "$push": {"view_history": {"count": 1, "timestamp": now}},
                "$set": {"last_viewed": now}
            },
            return_document=ReturnDocument.AFTER
        )

    async def record_anonymous_view(self, article_id: str, now: datetime) -> Optional[Dict[str, Any]]:
        """Count a view that cannot be de-duplicated."""
        return await self.collection.find_one_and_update(
            {"article_id": article_id},
            {"$inc": {"views": 1}, "$set": {"last_viewed": now}},
            return_document=ReturnDocument.AFTER
        )

    async def touch(self, article_id: str, now: datetime) -> Optional[Dict[str, Any]]:
        """Update last_viewed without counting a view."""
        return await self.collection.find_one_and_update(
            {"article_id": article_id},
            {"$set": {"last_viewed": now}},
            return_document=ReturnDocument.AFTER
        )

    async def set_trending_score(self, article_id: str, score: float) -> Optional[Dict[str, Any]]:
        """Persist a freshly computed trending score."""
        return await self.collection.find_one_and_update(
            {"article_id": article_id},
            {"$set": {"trending_score": score}},
            return_document=ReturnDocument.AFTER
        )

    async def upsert_likes(
        self,
        article_id: str,
        likes: int,
        now: datetime
    ) -> Dict[str, Any]:
        """
        Copy an article's like count into its stats record.

        Views, last_viewed and trending_score are only written when the
        record is created.
        """
        try:
            return await self.collection.find_one_and_update(
                {"article_id": article_id},
                {
                    "$set": {"likes": likes},
                    "$setOnInsert": self._insert_defaults(now)
                },
                upsert=True,
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # Lost an insert race; retry as a plain update
            return await self.collection.find_one_and_update(
                {"article_id": article_id},
                {"$set": {"likes": likes}},
                return_document=ReturnDocument.AFTER
            )

    async def update_likes(self, article_id: str, likes: int) -> Optional[Dict[str, Any]]:
        """Update likes on an existing stats record only."""
        return await self.collection.find_one_and_update(
            {"article_id": article_id},
            {"$set": {"likes": likes}},
            return_document=ReturnDocument.AFTER
        )

    async def iter_stats(self) -> AsyncIterator[Dict[str, Any]]:
        """Iterate over the counters of every stats record."""
        cursor = self.collection.find(
            {},
            {"article_id": 1, "views": 1, "likes": 1, "last_viewed": 1}
        )
        async for stats in cursor:
            yield stats

    async def list_article_refs(self) -> List[Dict[str, Any]]:
        """Get the ID and referenced article ID of every stats record."""
        cursor = self.collection.find({}, {"_id": 1, "article_id": 1})
        return await cursor.to_list(length=None)

    async def get_top_trending(self, limit: int) -> List[Dict[str, Any]]:
        """Get stats records with the highest trending score."""
        cursor = self.collection.find(
            {},
            {"unique_visitors": 0, "view_history": 0}
        ).sort("trending_score", DESCENDING).limit(limit)
        return await cursor.to_list(length=limit)

    async def delete_stats(self, stats_ids: Iterable[str]) -> int:
        """Delete stats records by ID. Already deleted IDs are ignored."""
        ids = list(stats_ids)
        if not ids:
            return 0
        result = await self.collection.delete_many({"_id": {"$in": ids}})
        return result.deleted_count
