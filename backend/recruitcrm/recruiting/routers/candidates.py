"""Candidates router - deduplicated candidate intake over Supabase."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from recruitcrm.core.exceptions import ConflictError, StorageError
from recruitcrm.core.supabase_client import SupabaseClient, get_supabase_client
from recruitcrm.recruiting.schemas.candidate import (
    BulkIngestRequest,
    BulkIngestResponse,
    CandidatePayload,
    CandidateRecord,
    CandidateSource,
    ProcessCandidateResponse,
)
from recruitcrm.recruiting.services.candidate_deduplication import get_deduplication_engine
from recruitcrm.recruiting.services.candidate_ingestion import (
    CandidateIngestionService,
    get_ingestion_service,
)
from recruitcrm.recruiting.services.candidate_store import CandidateStore, SupabaseCandidateStore
from recruitcrm.recruiting.services.embedding_jobs import EmbeddingJobService
from recruitcrm.services.job_queue import JobQueue

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_client() -> SupabaseClient:
    return get_supabase_client()


def get_candidate_store(client: SupabaseClient = Depends(get_client)) -> CandidateStore:
    return SupabaseCandidateStore(client)


def get_candidate_ingestion_service(
    store: CandidateStore = Depends(get_candidate_store),
    client: SupabaseClient = Depends(get_client),
) -> CandidateIngestionService:
    return get_ingestion_service(get_deduplication_engine(store), EmbeddingJobService(client))


def get_job_queue() -> JobQueue:
    return JobQueue()


# ============================================================================
# Routes
# ============================================================================

@router.post("", response_model=ProcessCandidateResponse)
async def submit_candidate(
    payload: CandidatePayload,
    response: Response,
    service: CandidateIngestionService = Depends(get_candidate_ingestion_service),
):
    """Manual candidate entry - creates new or merges into an existing candidate.

    Runs the payload through the deduplication engine and queues an embedding
    job when the candidate is new or its embedded content changed.
    Returns 201 when a candidate was created, 200 when one was updated.
    """
    if payload.source is None:
        payload.source = CandidateSource.MANUAL.value

    try:
        result, _ = await service.process_one(payload)
    except ConflictError as e:
        logger.warning(f"Candidate submit lost a concurrent update: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Candidate was modified concurrently, retry the request",
        )
    except StorageError as e:
        logger.error(f"Candidate submit failed: {e.message} {e.details}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to save candidate",
        )

    if result.action == "created":
        response.status_code = status.HTTP_201_CREATED

    return ProcessCandidateResponse(
        action=result.action,
        candidate_id=result.candidate.id,
        matched_on=result.matched_on,
        ambiguous=result.ambiguous,
        candidate=result.candidate,
    )


@router.post("/bulk", response_model=BulkIngestResponse, status_code=status.HTTP_202_ACCEPTED)
async def bulk_ingest_candidates(
    request: BulkIngestRequest,
    job_queue: JobQueue = Depends(get_job_queue),
):
    """Queue raw Apollo people or Loxo contacts for background ingestion."""
    job_id = await job_queue.enqueue_source_ingestion(request.source, request.records)

    if job_id is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ingestion queue unavailable",
        )

    return BulkIngestResponse(
        job_id=job_id,
        source=request.source,
        record_count=len(request.records),
    )


@router.get("/{candidate_id}", response_model=CandidateRecord)
async def get_candidate(
    candidate_id: str,
    store: CandidateStore = Depends(get_candidate_store),
):
    """Get a single candidate."""
    try:
        candidate = await store.get_by_id(candidate_id)
    except StorageError as e:
        logger.error(f"Candidate fetch failed: {e.message} {e.details}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load candidate",
        )

    if not candidate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Candidate not found",
        )

    return candidate
