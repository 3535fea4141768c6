# scripts/database/cleanup.py
"""Remove expired recommendations.

Intended to run from cron:

    python -m scripts.database.cleanup
"""

import asyncio

from closetai.core.logging import get_logger, setup_logging
from closetai.database.session import init_db, session_manager
from closetai.services.lifecycle import RecommendationLifecycleService

logger = get_logger(__name__)

async def cleanup_database() -> int:
    """Delete every recommendation past its expiry."""
    try:
        await init_db()
        async with session_manager.transaction() as session:
            removed = await RecommendationLifecycleService(session).expire_cleanup()
        return removed
    except Exception as e:
        logger.error("Database cleanup failed", error=e)
        raise
    finally:
        await session_manager.engine.dispose()

if __name__ == "__main__":
    setup_logging()
    asyncio.run(cleanup_database())
