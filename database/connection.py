"""Database connection setup for MongoDB."""
import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import DESCENDING, TEXT
from shared.config import settings

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Manages the MongoDB connection."""

    _mongo_client: Optional[AsyncIOMotorClient] = None
    _db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def init_mongo(cls) -> AsyncIOMotorDatabase:
        """Initialize MongoDB connection."""
        if cls._mongo_client is None:
            cls._mongo_client = AsyncIOMotorClient(settings.mongo_url, tz_aware=True)
            cls._db = cls._mongo_client[settings.mongo_db_name]
            await cls._setup_indexes()
            logger.info(f"Connected to MongoDB database {settings.mongo_db_name}")
        return cls._db

    @classmethod
    async def _setup_indexes(cls):
        """Set up MongoDB indexes for optimal query performance."""
        if cls._db is None:
            return

        # Articles collection indexes
        await cls._db.articles.create_index("url", unique=True)
        await cls._db.articles.create_index([("published_at", DESCENDING)])
        await cls._db.articles.create_index("source_name")
        await cls._db.articles.create_index("category")
        await cls._db.articles.create_index([
            ("title", TEXT),
            ("description", TEXT),
            ("content", TEXT)
        ])

        # Article stats: at most one record per article
        await cls._db.article_stats.create_index("article_id", unique=True)
        await cls._db.article_stats.create_index([("trending_score", DESCENDING)])

    @classmethod
    async def get_mongo_db(cls) -> AsyncIOMotorDatabase:
        """Get MongoDB database instance."""
        if cls._db is None:
            await cls.init_mongo()
        return cls._db

    @classmethod
    async def close_connections(cls):
        """Close the database connection."""
        if cls._mongo_client:
            cls._mongo_client.close()
            cls._mongo_client = None
            cls._db = None


async def get_db() -> AsyncIOMotorDatabase:
    """Dependency for getting MongoDB database."""
    return await DatabaseConnection.get_mongo_db()
