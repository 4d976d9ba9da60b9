"""Article repository for CRUD operations on Articles collection."""
from typing import Optional, List, Dict, Any, Iterable, Set, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
from shared.utils import generate_article_id, get_utc_now, normalize_url


class ArticleRepository:
    """Repository for Article CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.articles

    async def create_article(self, data: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """
        Insert an article unless its URL is already stored.

        Returns (article, created). Re-saving a known URL returns the stored
        record untouched.
        """
        normalized_url = normalize_url(data["url"])
        existing = await self.collection.find_one({"url": normalized_url})
        if existing:
            return existing, False

        article = {
            **data,
            "_id": generate_article_id(),
            "url": normalized_url,
            "like_count": 0,
            "created_at": get_utc_now()
        }

        try:
            await self.collection.insert_one(article)
            return article, True
        except DuplicateKeyError:
            # Another request stored the same URL first
            return await self.collection.find_one({"url": normalized_url}), False

    async def get_article(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Get an article by ID."""
        return await self.collection.find_one({"_id": article_id})

    async def get_articles_by_ids(self, article_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """Get multiple articles by their IDs, newest first."""
        cursor = self.collection.find(
            {"_id": {"$in": list(article_ids)}}
        ).sort("published_at", DESCENDING)
        return await cursor.to_list(length=None)

    async def get_existing_ids(self, article_ids: Iterable[str]) -> Set[str]:
        """Return the subset of the given IDs that still have an article."""
        cursor = self.collection.find(
            {"_id": {"$in": list(article_ids)}},
            {"_id": 1}
        )
        return {doc["_id"] async for doc in cursor}

    async def get_articles_by_sources(
        self,
        sources: Iterable[str],
        exclude_ids: Iterable[str] = ()
    ) -> List[Dict[str, Any]]:
        """Get articles published by any of the sources, newest first."""
        query: Dict[str, Any] = {"source_name": {"$in": list(sources)}}
        excluded = list(exclude_ids)
        if excluded:
            query["_id"] = {"$nin": excluded}
        cursor = self.collection.find(query).sort("published_at", DESCENDING)
        return await cursor.to_list(length=None)

    async def list_articles(
        self,
        source: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """List articles with optional source/category filters, newest first."""
        query: Dict[str, Any] = {}
        if source:
            query["source_name"] = source
        if category:
            query["category"] = category

        cursor = self.collection.find(query).sort("published_at", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=None)

    async def get_latest_articles(self, limit: int) -> List[Dict[str, Any]]:
        """Get the most recently published articles."""
        return await self.list_articles(limit=limit)

    async def count_by_category(self, category: str) -> int:
        """Count stored articles in a category."""
        return await self.collection.count_documents({"category": category})

    async def search_articles(
        self,
        query: str,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Full-text search ordered by relevance. Returns (page, total matches)."""
        search: Dict[str, Any] = {"$text": {"$search": query}}
        if category and category != "all":
            search["category"] = category

        cursor = self.collection.find(
            search,
            {"score": {"$meta": "textScore"}}
        ).sort([("score", {"$meta": "textScore"})]).skip(skip).limit(limit)
        articles = await cursor.to_list(length=limit)
        total = await self.collection.count_documents(search)
        return articles, total

    async def list_like_counts(self) -> List[Dict[str, Any]]:
        """Get the ID and like count of every article."""
        cursor = self.collection.find({}, {"_id": 1, "like_count": 1})
        return await cursor.to_list(length=None)

    async def increment_likes(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Increment the like count and return the updated article."""
        return await self.collection.find_one_and_update(
            {"_id": article_id},
            {"$inc": {"like_count": 1}},
            return_document=ReturnDocument.AFTER
        )

    async def decrement_likes(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Decrement the like count unless it is already zero.

        Returns the updated article, or None when nothing changed.
        """
        return await self.collection.find_one_and_update(
            {"_id": article_id, "like_count": {"$gt": 0}},
            {"$inc": {"like_count": -1}},
            return_document=ReturnDocument.AFTER
        )
