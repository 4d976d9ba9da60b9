"""Standalone entry point for the stats scheduler."""
import asyncio
import signal
import logging
from database.connection import DatabaseConnection
from scheduler.jobs import build_scheduler
from shared.config import settings

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main():
    """Run the scheduler until SIGINT/SIGTERM."""
    logger.info("Starting stats scheduler")

    db = await DatabaseConnection.init_mongo()
    scheduler = build_scheduler(db)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        scheduler.start()
        await stop_event.wait()
    finally:
        await scheduler.stop()
        await DatabaseConnection.close_connections()
        logger.info("Scheduler shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
