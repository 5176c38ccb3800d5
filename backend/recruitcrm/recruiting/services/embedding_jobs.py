"""Embedding job queue - rows in ``embedding_jobs`` picked up by the embedder."""

import logging
from enum import Enum
from typing import Optional, Tuple

from recruitcrm.core.exceptions import StorageError
from recruitcrm.core.supabase_client import SupabaseClient
from recruitcrm.recruiting.schemas.candidate import CandidateSource

logger = logging.getLogger(__name__)

EMBEDDING_JOBS_TABLE = "embedding_jobs"


class EmbeddingJobType(str, Enum):
    """What the embedder should (re)build for a candidate."""
    PROFILE = "profile"
    CV_CHUNKS = "cv_chunks"
    FULL_REINDEX = "full_reindex"


# Higher priority is processed first
SOURCE_EMBEDDING_JOBS = {
    CandidateSource.MANUAL.value: (EmbeddingJobType.PROFILE, 200),
    CandidateSource.APOLLO.value: (EmbeddingJobType.PROFILE, 200),
    CandidateSource.LOXO.value: (EmbeddingJobType.PROFILE, 150),
    CandidateSource.CV_UPLOAD.value: (EmbeddingJobType.CV_CHUNKS, 100),
}


def embedding_job_for_source(source: Optional[str]) -> Tuple[EmbeddingJobType, int]:
    """Job type and priority for a candidate ingested from ``source``."""
    return SOURCE_EMBEDDING_JOBS.get(source, (EmbeddingJobType.PROFILE, 100))


class EmbeddingJobService:
    """Queues embedding work for candidates."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def queue_embedding_job(
        self,
        candidate_id: str,
        job_type: EmbeddingJobType = EmbeddingJobType.PROFILE,
        priority: int = 100,
    ) -> Optional[str]:
        """Insert a pending embedding job.

        Returns:
            Job ID if queued, None if the insert failed. Failures are logged
            and not raised: the candidate write already succeeded.
        """
        try:
            job = await self.client.insert(
                EMBEDDING_JOBS_TABLE,
                {
                    "candidate_id": candidate_id,
                    "job_type": EmbeddingJobType(job_type).value,
                    "priority": priority,
                    "status": "pending",
                },
            )
        except StorageError as e:
            logger.error(f"Failed to queue embedding job for candidate {candidate_id}: {e.message}")
            return None

        logger.info(f"Queued {EmbeddingJobType(job_type).value} embedding job for candidate {candidate_id}")
        return job.get("id")
