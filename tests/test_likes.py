"""Like, unlike and follow tests."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import AutoReconnect, WriteConcernError

from api.services.likes import LikeService
from shared.errors import NotFoundError, StoreError
from tests.fakes import make_article


class TestLikeService:
    """Tests for LikeService class."""

    @pytest.fixture
    def service(self, article_repo, stats_repo, user_repo, clock):
        service = LikeService(MagicMock(), clock=clock)
        service.article_repo = article_repo
        service.stats_repo = stats_repo
        service.user_repo = user_repo
        return service

    @pytest.mark.asyncio
    async def test_like_updates_article_user_and_stats(self, service, article_repo, stats_repo, user_repo,
                                                       sample_article, sample_user):
        article_repo.add(sample_article)
        user_repo.add(sample_user)

        result = await service.like_article("art_test001", "user_test001")

        assert result.changed
        assert result.stats_synced
        assert result.article["like_count"] == 3
        assert article_repo.docs["art_test001"]["like_count"] == 3
        assert user_repo.docs["user_test001"]["liked_articles"] == ["art_test001"]
        assert stats_repo.docs["art_test001"]["likes"] == 3
        assert stats_repo.docs["art_test001"]["trending_score"] == 3 * 3 + 10

    @pytest.mark.asyncio
    async def test_like_twice_by_same_user(self, service, article_repo, user_repo, sample_article, sample_user):
        article_repo.add(sample_article)
        user_repo.add(sample_user)

        await service.like_article("art_test001", "user_test001")
        result = await service.like_article("art_test001", "user_test001")

        assert not result.changed
        assert result.message == "Article already liked by this user"
        assert article_repo.docs["art_test001"]["like_count"] == 3

    @pytest.mark.asyncio
    async def test_likes_from_stale_user_snapshot_count_once(self, service, article_repo, user_repo,
                                                              sample_article, sample_user):
        """Both calls read the user before either like lands."""
        article_repo.add(sample_article)
        user_repo.add(sample_user)
        user_repo.get_user = AsyncMock(return_value=dict(sample_user))

        first = await service.like_article("art_test001", "user_test001")
        second = await service.like_article("art_test001", "user_test001")

        assert first.changed
        assert not second.changed
        assert article_repo.docs["art_test001"]["like_count"] == 3

    @pytest.mark.asyncio
    async def test_unlikes_from_stale_user_snapshot_count_once(self, service, article_repo, user_repo,
                                                                sample_article, sample_user):
        article_repo.add(sample_article)
        liked_user = {**sample_user, "liked_articles": ["art_test001"]}
        user_repo.add(liked_user)
        user_repo.get_user = AsyncMock(return_value=dict(liked_user))

        first = await service.unlike_article("art_test001", "user_test001")
        second = await service.unlike_article("art_test001", "user_test001")

        assert first.changed
        assert not second.changed
        assert article_repo.docs["art_test001"]["like_count"] == 1

    @pytest.mark.asyncio
    async def test_anonymous_like(self, service, article_repo, sample_article):
        article_repo.add(sample_article)

        result = await service.like_article("art_test001")

        assert result.changed
        assert article_repo.docs["art_test001"]["like_count"] == 3

    @pytest.mark.asyncio
    async def test_like_missing_article(self, service):
        with pytest.raises(NotFoundError):
            await service.like_article("art_missing", "user_test001")

    @pytest.mark.asyncio
    async def test_stats_failure_is_partial_success(self, service, article_repo, sample_article):
        article_repo.add(sample_article)
        service.stats_repo = MagicMock()
        service.stats_repo.upsert_likes = AsyncMock(side_effect=WriteConcernError("stats write failed"))

        result = await service.like_article("art_test001")

        assert result.changed
        assert not result.stats_synced
        assert "stats write failed" in result.stats_error
        assert article_repo.docs["art_test001"]["like_count"] == 3

    @pytest.mark.asyncio
    async def test_unlike(self, service, article_repo, stats_repo, user_repo, sample_article, sample_user,
                          sample_stats):
        article_repo.add(sample_article)
        stats_repo.add(sample_stats)
        user_repo.add({**sample_user, "liked_articles": ["art_test001"]})

        result = await service.unlike_article("art_test001", "user_test001")

        assert result.changed
        assert article_repo.docs["art_test001"]["like_count"] == 1
        assert user_repo.docs["user_test001"]["liked_articles"] == []
        assert stats_repo.docs["art_test001"]["likes"] == 1
        assert stats_repo.docs["art_test001"]["trending_score"] == 5 + 3 + 10

    @pytest.mark.asyncio
    async def test_unlike_never_goes_negative(self, service, article_repo, stats_repo):
        article_repo.add(make_article("art_zero", like_count=0))

        result = await service.unlike_article("art_zero")

        assert not result.changed
        assert article_repo.docs["art_zero"]["like_count"] == 0
        assert stats_repo.docs == {}

    @pytest.mark.asyncio
    async def test_unlike_not_liked_by_user(self, service, article_repo, user_repo, sample_article, sample_user):
        article_repo.add(sample_article)
        user_repo.add(sample_user)

        result = await service.unlike_article("art_test001", "user_test001")

        assert not result.changed
        assert article_repo.docs["art_test001"]["like_count"] == 2

    @pytest.mark.asyncio
    async def test_unlike_does_not_create_stats(self, service, article_repo, stats_repo, sample_article):
        article_repo.add(sample_article)

        result = await service.unlike_article("art_test001")

        assert result.changed
        assert result.stats_synced
        assert stats_repo.docs == {}

    @pytest.mark.asyncio
    async def test_like_store_error(self, service):
        service.article_repo = MagicMock()
        service.article_repo.get_article = AsyncMock(side_effect=AutoReconnect("down"))

        with pytest.raises(StoreError):
            await service.like_article("art_test001")

    @pytest.mark.asyncio
    async def test_follow_and_unfollow(self, service, user_repo, sample_user):
        user_repo.add(sample_user)

        assert await service.follow_source("user_test001", "BBC") == ["BBC"]
        assert await service.follow_source("user_test001", "BBC") == ["BBC"]
        assert await service.follow_source("user_test001", "CNN") == ["BBC", "CNN"]
        assert await service.unfollow_source("user_test001", "BBC") == ["CNN"]

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            await service.follow_source("user_missing", "BBC")

    @pytest.mark.asyncio
    async def test_get_user_data(self, service, user_repo, sample_user):
        user_repo.add({**sample_user, "followed_sources": ["BBC"]})

        data = await service.get_user_data("user_test001")

        assert data == {
            "id": "user_test001",
            "username": "reader",
            "email": "reader@example.com",
            "liked_articles": [],
            "followed_sources": ["BBC"]
        }

    @pytest.mark.asyncio
    async def test_get_unknown_user_data(self, service):
        with pytest.raises(NotFoundError):
            await service.get_user_data("user_missing")
