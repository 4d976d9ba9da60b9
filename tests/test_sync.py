"""Like synchronization and stats cleanup tests."""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import AutoReconnect

from api.services.reaper import StatsReaper
from api.services.sync import LikeSynchronizer
from shared.errors import StoreError
from tests.fakes import NOW, make_article


class TestLikeSynchronizer:
    """Tests for LikeSynchronizer class."""

    @pytest.fixture
    def synchronizer(self, article_repo, stats_repo, clock):
        synchronizer = LikeSynchronizer(MagicMock(), clock=clock)
        synchronizer.article_repo = article_repo
        synchronizer.stats_repo = stats_repo
        synchronizer.trending.article_repo = article_repo
        synchronizer.trending.stats_repo = stats_repo
        return synchronizer

    @pytest.mark.asyncio
    async def test_sync_creates_missing_stats(self, synchronizer, article_repo, stats_repo):
        article_repo.add(make_article("art_001", like_count=4))

        count = await synchronizer.sync_all()

        assert count == 1
        stats = stats_repo.docs["art_001"]
        assert stats["likes"] == 4
        assert stats["views"] == 0
        assert stats["trending_score"] == 4 * 3 + 10

    @pytest.mark.asyncio
    async def test_sync_keeps_existing_views_and_last_viewed(self, synchronizer, article_repo, stats_repo, sample_stats):
        article_repo.add(make_article("art_test001", like_count=7))
        last_viewed = NOW - timedelta(hours=4)
        stats_repo.add({**sample_stats, "likes": 2, "last_viewed": last_viewed})

        await synchronizer.sync_all()

        stats = stats_repo.docs["art_test001"]
        assert stats["likes"] == 7
        assert stats["views"] == 5
        assert stats["last_viewed"] == last_viewed
        assert stats["trending_score"] == 5 + 21 + 6

    @pytest.mark.asyncio
    async def test_sync_is_idempotent(self, synchronizer, article_repo, stats_repo, sample_stats):
        article_repo.add(make_article("art_test001", like_count=3))
        article_repo.add(make_article("art_002", like_count=0))
        stats_repo.add({**sample_stats, "last_viewed": NOW - timedelta(hours=2)})

        await synchronizer.sync_all()
        first = {k: (v["likes"], v["trending_score"]) for k, v in stats_repo.docs.items()}
        await synchronizer.sync_all()
        second = {k: (v["likes"], v["trending_score"]) for k, v in stats_repo.docs.items()}

        assert first == second
        assert set(second) == {"art_test001", "art_002"}

    @pytest.mark.asyncio
    async def test_scores_reflect_synced_likes_for_all_records(self, synchronizer, article_repo, stats_repo):
        """Scores are recomputed after every like is written."""
        for i in range(3):
            article_repo.add(make_article(f"art_{i}", like_count=i + 1))

        await synchronizer.sync_all()

        for i in range(3):
            assert stats_repo.docs[f"art_{i}"]["trending_score"] == (i + 1) * 3 + 10

    @pytest.mark.asyncio
    async def test_sync_likes_only_does_not_rescore(self, synchronizer, article_repo, stats_repo, sample_stats):
        article_repo.add(make_article("art_test001", like_count=9))
        stats_repo.add(sample_stats)

        await synchronizer.sync_likes()

        assert stats_repo.docs["art_test001"]["likes"] == 9
        assert stats_repo.docs["art_test001"]["trending_score"] == 21.0

    @pytest.mark.asyncio
    async def test_sync_with_no_articles(self, synchronizer):
        assert await synchronizer.sync_all() == 0

    @pytest.mark.asyncio
    async def test_sync_store_error(self, synchronizer):
        synchronizer.article_repo = MagicMock()
        synchronizer.article_repo.list_like_counts = AsyncMock(side_effect=AutoReconnect("down"))

        with pytest.raises(StoreError):
            await synchronizer.sync_all()


class TestStatsReaper:
    """Tests for StatsReaper class."""

    @pytest.fixture
    def reaper(self, article_repo, stats_repo):
        reaper = StatsReaper(MagicMock())
        reaper.article_repo = article_repo
        reaper.stats_repo = stats_repo
        return reaper

    @pytest.mark.asyncio
    async def test_orphans_removed_and_referenced_kept(self, reaper, article_repo, stats_repo):
        article_repo.add(make_article("art_kept"))
        stats_repo.add({"_id": "s_kept", "article_id": "art_kept"})
        stats_repo.add({"_id": "s_orphan", "article_id": "art_deleted"})

        deleted = await reaper.reap()

        assert deleted == 1
        assert set(stats_repo.docs) == {"art_kept"}

    @pytest.mark.asyncio
    async def test_article_deleted_after_stats_created(self, reaper, article_repo, stats_repo):
        article_repo.add(make_article("art_001"))
        stats_repo.add({"_id": "s_001", "article_id": "art_001"})
        article_repo.delete("art_001")

        assert await reaper.reap() == 1
        assert stats_repo.docs == {}

    @pytest.mark.asyncio
    async def test_nothing_to_reap(self, reaper):
        assert await reaper.reap() == 0

    @pytest.mark.asyncio
    async def test_concurrent_deletion_is_tolerated(self, reaper, stats_repo):
        """An orphan deleted by another run between listing and deleting is not an error."""
        stats_repo.add({"_id": "s_orphan", "article_id": "art_deleted"})
        original_list = stats_repo.list_article_refs

        async def list_then_lose_race():
            refs = await original_list()
            await stats_repo.delete_stats(["s_orphan"])
            return refs

        stats_repo.list_article_refs = list_then_lose_race

        assert await reaper.reap() == 0
        assert stats_repo.docs == {}
