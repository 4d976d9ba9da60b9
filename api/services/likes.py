"""Likes and source follows."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from api.models import UserModel
from api.services.trending import score_stats
from database.repositories.article_repo import ArticleRepository
from database.repositories.stats_repo import StatsRepository
from database.repositories.user_repo import UserRepository
from shared.errors import NotFoundError, StoreError
from shared.utils import get_utc_now

logger = logging.getLogger(__name__)


@dataclass
class LikeResult:
    """
    Outcome of a like or unlike.

    The article's like_count is the primary update. When the stats record
    could not be updated, ``stats_synced`` is False and the stats catch up
    at the next like sync.
    """
    article: Dict[str, Any]
    message: str
    changed: bool = True
    stats_synced: bool = True
    stats_error: Optional[str] = None


class LikeService:
    """Service for likes, unlikes and source follows."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        clock: Callable[[], datetime] = get_utc_now
    ):
        self.article_repo = ArticleRepository(db)
        self.stats_repo = StatsRepository(db)
        self.user_repo = UserRepository(db)
        self.clock = clock

    async def like_article(self, article_id: str, user_id: Optional[str] = None) -> LikeResult:
        """
        Like an article.

        A known user who already liked the article leaves the count
        unchanged. Anonymous or unknown users always add a like.
        """
        try:
            article = await self.article_repo.get_article(article_id)
            if not article:
                raise NotFoundError("Article not found")

            user = await self._find_user(user_id)
            # Liked-set membership gates the counter
            if user and not await self.user_repo.add_liked_article(user.id, article_id):
                return LikeResult(article, "Article already liked by this user", changed=False)

            article = await self.article_repo.increment_likes(article_id) or article
        except PyMongoError as e:
            raise StoreError.wrap("Error liking article", e) from e

        result = LikeResult(article, "Article liked successfully")
        await self._update_stats(result, create=True)
        return result

    async def unlike_article(self, article_id: str, user_id: Optional[str] = None) -> LikeResult:
        """Remove a like. The count never drops below zero."""
        try:
            article = await self.article_repo.get_article(article_id)
            if not article:
                raise NotFoundError("Article not found")

            user = await self._find_user(user_id)
            if user and not await self.user_repo.remove_liked_article(user.id, article_id):
                return LikeResult(article, "Article not liked by this user", changed=False)

            updated = await self.article_repo.decrement_likes(article_id)
        except PyMongoError as e:
            raise StoreError.wrap("Error unliking article", e) from e

        if updated is None:
            return LikeResult(article, "Article unliked successfully", changed=False)

        result = LikeResult(updated, "Article unliked successfully")
        await self._update_stats(result, create=False)
        return result

    async def _find_user(self, user_id: Optional[str]) -> Optional[UserModel]:
        if not user_id:
            return None
        doc = await self.user_repo.get_user(user_id)
        return UserModel.model_validate(doc) if doc else None

    async def _update_stats(self, result: LikeResult, create: bool) -> None:
        """Mirror the new like count into the stats record, best effort."""
        article_id = result.article["_id"]
        likes = result.article.get("like_count", 0)
        now = self.clock()
        try:
            if create:
                stats = await self.stats_repo.upsert_likes(article_id, likes, now)
            else:
                stats = await self.stats_repo.update_likes(article_id, likes)
            if stats:
                await self.stats_repo.set_trending_score(article_id, score_stats(stats, now))
        except PyMongoError as e:
            logger.warning(f"Error updating stats for article {article_id}: {e}")
            result.stats_synced = False
            result.stats_error = str(e)

    async def follow_source(self, user_id: str, source_name: str) -> List[str]:
        """Follow a news source. Returns the user's followed sources."""
        try:
            user = await self.user_repo.follow_source(user_id, source_name)
        except PyMongoError as e:
            raise StoreError.wrap("Error following source", e) from e
        if not user:
            raise NotFoundError("User not found")
        return user.get("followed_sources", [])

    async def unfollow_source(self, user_id: str, source_name: str) -> List[str]:
        """Unfollow a news source. Returns the user's followed sources."""
        try:
            user = await self.user_repo.unfollow_source(user_id, source_name)
        except PyMongoError as e:
            raise StoreError.wrap("Error unfollowing source", e) from e
        if not user:
            raise NotFoundError("User not found")
        return user.get("followed_sources", [])

    async def get_user_data(self, user_id: str) -> Dict[str, Any]:
        """Get a user's profile and preference signals."""
        try:
            doc = await self.user_repo.get_user(user_id)
        except PyMongoError as e:
            raise StoreError.wrap("Error fetching user data", e) from e
        if not doc:
            raise NotFoundError("User not found")
        return UserModel.model_validate(doc).model_dump()
