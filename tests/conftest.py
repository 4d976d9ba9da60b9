"""Pytest configuration and fixtures."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fakes import (
    NOW,
    FakeArticleRepository,
    FakeStatsRepository,
    FakeUserRepository,
    FixedClock,
    make_article
)


@pytest.fixture
def mock_mongo_db():
    """Create mock MongoDB database."""
    db = MagicMock()

    db.articles = MagicMock()
    db.article_stats = MagicMock()
    db.users = MagicMock()

    for collection in (db.articles, db.article_stats, db.users):
        collection.find_one = AsyncMock()
        collection.insert_one = AsyncMock()
        collection.update_one = AsyncMock()
        collection.find_one_and_update = AsyncMock()
        collection.delete_many = AsyncMock()
        collection.count_documents = AsyncMock()
        collection.find = MagicMock()

    return db


@pytest.fixture
def clock():
    """Clock frozen at NOW."""
    return FixedClock(NOW)


@pytest.fixture
def article_repo():
    return FakeArticleRepository()


@pytest.fixture
def stats_repo():
    return FakeStatsRepository()


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def sample_article():
    """Create sample article data."""
    return make_article("art_test001", like_count=2)


@pytest.fixture
def sample_stats():
    """Create sample stats data."""
    return {
        "_id": "stat_test001",
        "article_id": "art_test001",
        "views": 5,
        "likes": 2,
        "last_viewed": NOW,
        "trending_score": 21.0,
        "view_history": [],
        "unique_visitors": ["user_1"]
    }


@pytest.fixture
def sample_user():
    """Create sample user preference data."""
    return {
        "_id": "user_test001",
        "username": "reader",
        "email": "reader@example.com",
        "liked_articles": [],
        "followed_sources": []
    }
