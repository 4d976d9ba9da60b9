"""Periodic maintenance jobs for article stats."""
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.services.reaper import StatsReaper
from api.services.sync import LikeSynchronizer
from api.services.trending import TrendingService
from scheduler.scheduler import TaskScheduler
from shared.config import settings


def build_scheduler(
    db: AsyncIOMotorDatabase,
    scheduler: Optional[TaskScheduler] = None
) -> TaskScheduler:
    """
    Register the stats jobs.

    - Trending scores recomputed every hour
    - Likes synced every 12 hours
    - Orphaned stats removed every 24 hours
    - Likes synced (and scores recomputed) once shortly after startup
    """
    scheduler = scheduler or TaskScheduler()
    trending = TrendingService(db)
    synchronizer = LikeSynchronizer(db)
    reaper = StatsReaper(db)

    scheduler.every(settings.trending_refresh_interval, "update_trending_scores", trending.refresh_scores)
    scheduler.every(settings.like_sync_interval, "sync_article_likes", synchronizer.sync_all)
    scheduler.every(settings.stats_cleanup_interval, "cleanup_old_stats", reaper.reap)
    scheduler.once(settings.startup_sync_delay, "startup_sync", synchronizer.sync_all)

    return scheduler
