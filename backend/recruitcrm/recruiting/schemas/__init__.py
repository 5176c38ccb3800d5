# Recruiting schemas
from recruitcrm.recruiting.schemas.candidate import (
    BulkIngestRequest,
    BulkIngestResponse,
    CandidateFields,
    CandidatePayload,
    CandidateRecord,
    CandidateSource,
    EmbeddingStatus,
    ProcessCandidateResponse,
)

__all__ = [
    "BulkIngestRequest",
    "BulkIngestResponse",
    "CandidateFields",
    "CandidatePayload",
    "CandidateRecord",
    "CandidateSource",
    "EmbeddingStatus",
    "ProcessCandidateResponse",
]
