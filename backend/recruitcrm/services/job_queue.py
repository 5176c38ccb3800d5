"""Job Queue Service - Helper to enqueue background jobs from the API."""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from redis.exceptions import RedisError

from recruitcrm.config import get_settings

logger = logging.getLogger(__name__)

# Global connection pool
_redis_pool: Optional[ArqRedis] = None


def get_redis_settings() -> RedisSettings:
    """Get Redis connection settings from config."""
    return RedisSettings.from_dsn(get_settings().redis_url)


async def get_redis_pool() -> ArqRedis:
    """Get or create the Redis connection pool."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = await create_pool(get_redis_settings())
    return _redis_pool


async def close_redis_pool():
    """Close the Redis connection pool."""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.close()
        _redis_pool = None


class JobQueue:
    """Service for enqueuing background jobs."""

    @staticmethod
    async def enqueue_source_ingestion(
        source: str,
        records: List[Dict[str, Any]],
        delay: Optional[timedelta] = None,
    ) -> Optional[str]:
        """
        Enqueue ingestion of raw Apollo people or Loxo contacts.

        Args:
            source: 'apollo' or 'loxo'
            records: Raw records exactly as the source API returned them
            delay: Optional delay before processing

        Returns:
            Job ID if enqueued successfully, None otherwise
        """
        try:
            pool = await get_redis_pool()
            job = await pool.enqueue_job(
                "ingest_source_records",
                source,
                records,
                _defer_by=delay,
            )
        except (RedisError, OSError) as e:
            logger.error(f"Failed to enqueue {source} ingestion: {str(e)}")
            return None

        if job is None:
            logger.error(f"{source} ingestion job was not enqueued (duplicate job id)")
            return None

        logger.info(f"Enqueued {source} ingestion job {job.job_id} ({len(records)} records)")
        return job.job_id


# Singleton instance
job_queue = JobQueue()
