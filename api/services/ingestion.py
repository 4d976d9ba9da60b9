"""Article ingestion, listing and search."""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.models import CategoryEnum
from database.repositories.article_repo import ArticleRepository
from ingestion.gnews import GNewsClient, NewsResults
from shared.errors import StoreError, ValidationError
from shared.utils import get_utc_now, parse_datetime, validate_url

logger = logging.getLogger(__name__)


def validate_category(category: Optional[str]) -> str:
    """Return a known category, defaulting to general."""
    if not category:
        return CategoryEnum.GENERAL.value
    try:
        return CategoryEnum(category).value
    except ValueError:
        raise ValidationError(f"Unknown category: {category}")


def build_article_record(payload: Dict[str, Any], category: Optional[str] = None) -> Dict[str, Any]:
    """
    Map a news API article (nested ``source``) or a flat article payload
    onto the stored article fields.
    """
    if not payload.get("title") or not payload.get("url"):
        raise ValidationError("Article data is incomplete")
    if not validate_url(payload["url"]):
        raise ValidationError(f"Invalid article URL: {payload['url']}")

    source = payload.get("source") or {}
    published_at = parse_datetime(payload.get("publishedAt") or payload.get("published_at"))

    return {
        "title": payload["title"],
        "description": payload.get("description") or "",
        "content": payload.get("content") or "",
        "url": payload["url"],
        "image": payload.get("image") or "",
        "published_at": published_at or get_utc_now(),
        "source_name": source.get("name") or payload.get("source_name") or "Unknown",
        "source_url": source.get("url") or payload.get("source_url") or "",
        "category": validate_category(category or payload.get("category"))
    }


class IngestionService:
    """Service for storing articles from the news API and querying them."""

    def __init__(self, db: AsyncIOMotorDatabase, client: Optional[GNewsClient] = None):
        self.article_repo = ArticleRepository(db)
        self.client = client or GNewsClient()

    async def save_article(self, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """
        Store one article unless its URL is already known.

        Returns (article, created); for a known URL the stored record is
        returned unchanged.
        """
        record = build_article_record(payload)
        try:
            return await self.article_repo.create_article(record)
        except PyMongoError as e:
            raise StoreError.wrap("Error saving article", e) from e

    async def fetch_and_save(self, category: Optional[str] = None) -> Tuple[int, List[Dict[str, Any]]]:
        """
        Pull top headlines for a category and store the new ones.

        Returns (number of new articles, all stored articles in the category).
        """
        category = validate_category(category)
        results = await self.client.top_headlines(category)

        saved = 0
        try:
            for raw in results.articles:
                try:
                    record = build_article_record(raw, category=category)
                except ValidationError as e:
                    logger.warning(f"Skipping article from news API: {e.message}")
                    continue
                _, created = await self.article_repo.create_article(record)
                if created:
                    saved += 1
            articles = await self.article_repo.list_articles(category=category)
        except PyMongoError as e:
            raise StoreError.wrap("Error fetching or saving news", e) from e

        logger.info(f"Saved {saved} new {category} articles")
        return saved, articles

    async def search_remote(self, query: str, max_results: int = 10, page: int = 1) -> NewsResults:
        """Search the news API without storing the results."""
        if not query:
            raise ValidationError("Search query is required")
        return await self.client.search(query, max_results=max_results, page=page)

    async def search_local(
        self,
        query: str,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None
    ) -> Dict[str, Any]:
        """Full-text search over stored articles, paginated."""
        if not query:
            raise ValidationError("Search query is required")
        page = max(1, page)
        limit = max(1, limit)

        try:
            articles, total = await self.article_repo.search_articles(
                query,
                category=category,
                skip=(page - 1) * limit,
                limit=limit
            )
        except PyMongoError as e:
            raise StoreError.wrap("Error searching articles in database", e) from e

        return {
            "articles": articles,
            "total_articles": total,
            "total_pages": math.ceil(total / limit) if total else 0
        }

    async def list_articles(
        self,
        source: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """List stored articles, newest first."""
        try:
            return await self.article_repo.list_articles(source=source, category=category, limit=limit)
        except PyMongoError as e:
            raise StoreError.wrap("Error fetching articles from database", e) from e

    async def check_category(self, category: str) -> int:
        """Count stored articles in a category."""
        if not category:
            raise ValidationError("Category parameter is required")
        try:
            return await self.article_repo.count_by_category(category)
        except PyMongoError as e:
            raise StoreError.wrap("Error checking category articles", e) from e
