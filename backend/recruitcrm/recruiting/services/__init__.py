"""Recruiting services."""

from recruitcrm.recruiting.services.candidate_deduplication import (
    DeduplicationEngine,
    DeduplicationResult,
    MatchReason,
    generate_content_hash,
    get_deduplication_engine,
    has_significant_changes,
)
from recruitcrm.recruiting.services.candidate_ingestion import (
    CandidateIngestionService,
    IngestionSummary,
    get_ingestion_service,
)
from recruitcrm.recruiting.services.candidate_store import CandidateStore, SupabaseCandidateStore
from recruitcrm.recruiting.services.embedding_jobs import EmbeddingJobService, EmbeddingJobType

__all__ = [
    "CandidateIngestionService",
    "CandidateStore",
    "DeduplicationEngine",
    "DeduplicationResult",
    "EmbeddingJobService",
    "EmbeddingJobType",
    "IngestionSummary",
    "MatchReason",
    "SupabaseCandidateStore",
    "generate_content_hash",
    "get_deduplication_engine",
    "get_ingestion_service",
    "has_significant_changes",
]
