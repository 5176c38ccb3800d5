"""ARQ Worker Entry Point.

Run with: arq workers.worker.WorkerSettings

This starts the background worker process that handles:
- Apollo / Loxo record ingestion through the deduplication engine
"""

import logging
from datetime import datetime, timezone

import httpx

from recruitcrm.config import get_settings
from recruitcrm.core.supabase_client import create_supabase_client
from recruitcrm.recruiting.services.candidate_deduplication import get_deduplication_engine
from recruitcrm.recruiting.services.candidate_ingestion import get_ingestion_service
from recruitcrm.recruiting.services.candidate_store import SupabaseCandidateStore
from recruitcrm.recruiting.services.embedding_jobs import EmbeddingJobService
from recruitcrm.services.job_queue import get_redis_settings
from workers.tasks import BACKGROUND_TASKS

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def startup(ctx):
    """Worker startup - build the Supabase-backed ingestion pipeline."""
    logger.info("=" * 50)
    logger.info("ARQ Worker Starting")
    logger.info(f"Started at: {datetime.now(timezone.utc).isoformat()}")
    logger.info(f"Redis: {settings.redis_url}")
    logger.info("=" * 50)

    http_client = httpx.AsyncClient()
    client = create_supabase_client(http_client=http_client)
    engine = get_deduplication_engine(SupabaseCandidateStore(client))

    ctx["http_client"] = http_client
    ctx["ingestion_service"] = get_ingestion_service(engine, EmbeddingJobService(client))


async def shutdown(ctx):
    """Worker shutdown - cleanup connections."""
    http_client = ctx.get("http_client")
    if http_client is not None:
        await http_client.aclose()
    logger.info("ARQ Worker Shutting Down")
    logger.info(f"Stopped at: {datetime.now(timezone.utc).isoformat()}")


class WorkerSettings:
    """ARQ Worker Settings.

    Available tasks:
    - ingest_source_records: Normalize and deduplicate Apollo/Loxo records
    """

    # Redis connection settings
    redis_settings = get_redis_settings()

    # All available task functions
    functions = BACKGROUND_TASKS

    # Lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Worker configuration
    max_jobs = 10  # Max concurrent jobs
    job_timeout = 1800  # Large syncs run batches with inter-batch delays
    keep_result = 3600  # Keep results for 1 hour
    poll_delay = 0.5  # Poll Redis every 0.5 seconds
