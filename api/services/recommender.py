"""Personalized article recommendations."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.models import UserModel
from database.repositories.article_repo import ArticleRepository
from database.repositories.user_repo import UserRepository
from shared.config import settings
from shared.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class Recommendation:
    """Ranked articles plus the size of each signal."""
    articles: List[Dict[str, Any]] = field(default_factory=list)
    liked_count: int = 0
    followed_sources_count: int = 0
    related_count: int = 0


def merge_unique(*groups: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Concatenate article groups, keeping the first occurrence of each ID."""
    seen = set()
    merged = []
    for group in groups:
        for article in group:
            if article["_id"] in seen:
                continue
            seen.add(article["_id"])
            merged.append(article)
    return merged


class Recommender:
    """Builds a user's feed from liked articles and sources."""

    def __init__(self, db: AsyncIOMotorDatabase, fallback_limit: Optional[int] = None):
        self.article_repo = ArticleRepository(db)
        self.user_repo = UserRepository(db)
        if fallback_limit is None:
            fallback_limit = settings.recommendation_fallback_limit
        self.fallback_limit = fallback_limit

    async def recommend(self, user_id: str) -> Recommendation:
        """
        Recommend articles for a user.

        Order of precedence: liked articles, then articles from followed
        sources, then other articles from the sources of liked articles.
        Each group is newest first and an article appears once, in the
        earliest group that contains it. Falls back to the latest articles
        when nothing matches.
        """
        try:
            user_doc = await self.user_repo.get_user(user_id)
            if not user_doc:
                raise NotFoundError("User not found")
            user = UserModel.model_validate(user_doc)

            liked_ids = user.liked_articles
            liked, followed = await asyncio.gather(
                self._liked_articles(liked_ids),
                self._followed_source_articles(user.followed_sources, liked_ids)
            )
            related = await self._related_articles(liked, liked_ids)

            articles = merge_unique(merge_unique(liked, followed), related)
            if not articles:
                articles = await self.article_repo.get_latest_articles(self.fallback_limit)
        except PyMongoError as e:
            raise StoreError.wrap("Error getting recommended articles", e) from e

        liked_set = set(liked_ids)
        followed_set = set(user.followed_sources)
        annotated = []
        for article in articles:
            is_liked = article["_id"] in liked_set
            is_from_followed_source = article.get("source_name") in followed_set
            annotated.append({
                **article,
                "is_liked": is_liked,
                "is_from_followed_source": is_from_followed_source,
                "is_related": not is_liked and not is_from_followed_source
            })

        logger.debug(
            f"Recommended {len(annotated)} articles for user {user_id} "
            f"({len(liked)} liked, {len(followed)} followed, {len(related)} related)"
        )
        return Recommendation(
            articles=annotated,
            liked_count=len(liked_ids),
            followed_sources_count=len(user.followed_sources),
            related_count=len(related)
        )

    async def _liked_articles(self, liked_ids: List[str]) -> List[Dict[str, Any]]:
        if not liked_ids:
            return []
        return await self.article_repo.get_articles_by_ids(liked_ids)

    async def _followed_source_articles(
        self,
        sources: List[str],
        liked_ids: List[str]
    ) -> List[Dict[str, Any]]:
        if not sources:
            return []
        return await self.article_repo.get_articles_by_sources(sources, exclude_ids=liked_ids)

    async def _related_articles(
        self,
        liked: List[Dict[str, Any]],
        liked_ids: List[str]
    ) -> List[Dict[str, Any]]:
        liked_sources = {article.get("source_name") for article in liked}
        liked_sources.discard(None)
        liked_sources.discard("")
        if not liked_sources:
            return []
        return await self.article_repo.get_articles_by_sources(
            sorted(liked_sources),
            exclude_ids=liked_ids
        )
