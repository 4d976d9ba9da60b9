"""User preference repository.

Users are registered by the authentication service; this repository only
reads and updates their liked articles and followed sources.
"""
from typing import Optional, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument


class UserRepository:
    """Repository for user preference signals."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.users

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user by ID."""
        return await self.collection.find_one({"_id": user_id})

    async def add_liked_article(self, user_id: str, article_id: str) -> bool:
        """Add an article to the user's liked set. False if already present."""
        result = await self.collection.update_one(
            {"_id": user_id},
            {"$addToSet": {"liked_articles": article_id}}
        )
        return result.modified_count > 0

    async def remove_liked_article(self, user_id: str, article_id: str) -> bool:
        """Remove an article from the user's liked set. False if absent."""
        result = await self.collection.update_one(
            {"_id": user_id},
            {"$pull": {"liked_articles": article_id}}
        )
        return result.modified_count > 0

    async def follow_source(self, user_id: str, source_name: str) -> Optional[Dict[str, Any]]:
        """Add a source to the user's followed set and return the user."""
        return await self.collection.find_one_and_update(
            {"_id": user_id},
            {"$addToSet": {"followed_sources": source_name}},
            return_document=ReturnDocument.AFTER
        )

    async def unfollow_source(self, user_id: str, source_name: str) -> Optional[Dict[str, Any]]:
        """Remove a source from the user's followed set and return the user."""
        return await self.collection.find_one_and_update(
            {"_id": user_id},
            {"$pull": {"followed_sources": source_name}},
            return_document=ReturnDocument.AFTER
        )
