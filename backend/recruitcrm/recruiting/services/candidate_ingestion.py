"""Batch ingestion of candidate payloads through the deduplication engine.

Payloads are processed in fixed-size batches with bounded concurrency and a
pause between batches to respect upstream API rate limits. A failing record
is counted and logged without aborting the rest of the batch.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from recruitcrm.config import get_settings
from recruitcrm.recruiting.schemas.candidate import CandidatePayload
from recruitcrm.recruiting.services.candidate_deduplication import (
    DeduplicationEngine,
    DeduplicationResult,
    has_significant_changes,
)
from recruitcrm.recruiting.services.embedding_jobs import (
    EmbeddingJobService,
    embedding_job_for_source,
)

logger = logging.getLogger(__name__)


@dataclass
class IngestionSummary:
    """Counters for one ingestion run."""
    total: int = 0
    processed: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    skipped_duplicates: int = 0
    embedding_jobs_queued: int = 0
    candidate_ids: List[str] = field(default_factory=list)
    error_messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def needs_embedding(result: DeduplicationResult, payload: CandidatePayload) -> bool:
    """New candidates always embed; merged ones only when embedded content changed."""
    if result.action == "created" or result.previous is None:
        return True
    return has_significant_changes(result.previous, payload)


class CandidateIngestionService:
    """Runs many payloads through deduplication and queues embedding work."""

    def __init__(
        self,
        engine: DeduplicationEngine,
        embedding_jobs: Optional[EmbeddingJobService] = None,
        batch_size: int = 50,
        concurrency: int = 5,
        batch_delay_seconds: float = 1.0,
    ):
        self.engine = engine
        self.embedding_jobs = embedding_jobs
        self.batch_size = max(1, batch_size)
        self.concurrency = max(1, concurrency)
        self.batch_delay_seconds = batch_delay_seconds

    async def process_one(self, payload: CandidatePayload) -> tuple[DeduplicationResult, bool]:
        """Process a single payload and queue its embedding job if needed.

        Returns the deduplication result and whether a job was queued.
        """
        result = await self.engine.process_candidate(payload)

        queued = False
        if self.embedding_jobs is not None and needs_embedding(result, payload):
            job_type, priority = embedding_job_for_source(payload.source)
            job_id = await self.embedding_jobs.queue_embedding_job(
                result.candidate.id, job_type, priority
            )
            queued = job_id is not None

        return result, queued

    async def ingest(self, payloads: Sequence[CandidatePayload]) -> IngestionSummary:
        """Ingest all payloads and return the run's counters."""
        summary = IngestionSummary(total=len(payloads))
        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(payload: CandidatePayload):
            async with semaphore:
                return await self.process_one(payload)

        logger.info(
            f"Starting candidate ingestion: {summary.total} records, "
            f"batch size {self.batch_size}, concurrency {self.concurrency}"
        )

        for start in range(0, len(payloads), self.batch_size):
            if start > 0 and self.batch_delay_seconds > 0:
                await asyncio.sleep(self.batch_delay_seconds)

            batch = payloads[start:start + self.batch_size]
            outcomes = await asyncio.gather(
                *[bounded(payload) for payload in batch],
                return_exceptions=True,
            )

            for payload, outcome in zip(batch, outcomes):
                if isinstance(outcome, Exception):
                    summary.errors += 1
                    summary.error_messages.append(str(outcome))
                    logger.error(
                        f"Failed to ingest candidate (source: {payload.source}, "
                        f"external_id: {payload.external_id}): {outcome}"
                    )
                    continue
                if isinstance(outcome, BaseException):
                    raise outcome

                result, queued = outcome
                summary.processed += 1
                summary.candidate_ids.append(result.candidate.id)
                if result.action == "created":
                    summary.created += 1
                else:
                    summary.updated += 1
                if queued:
                    summary.embedding_jobs_queued += 1

            logger.info(
                f"Ingestion progress: {summary.processed + summary.errors}/{summary.total} "
                f"(created {summary.created}, updated {summary.updated}, errors {summary.errors})"
            )

        return summary


def get_ingestion_service(
    engine: DeduplicationEngine,
    embedding_jobs: Optional[EmbeddingJobService] = None,
) -> CandidateIngestionService:
    """Build an ingestion service using the configured batching options."""
    settings = get_settings()
    return CandidateIngestionService(
        engine,
        embedding_jobs,
        batch_size=settings.ingestion_batch_size,
        concurrency=settings.ingestion_concurrency,
        batch_delay_seconds=settings.ingestion_batch_delay_seconds,
    )
