"""Candidate schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CandidateSource(str, Enum):
    """Ingestion path a candidate record came from."""
    APOLLO = "apollo"
    LOXO = "loxo"
    CV_UPLOAD = "cv_upload"
    MANUAL = "manual"


class EmbeddingStatus(str, Enum):
    """Lifecycle of a candidate's search embeddings."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class CandidateFields(BaseModel):
    """Fields shared by stored candidates and incoming payloads.

    Every field is optional because source systems vary in richness.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    source: Optional[CandidateSource] = None
    external_id: Optional[str] = None

    # Identity
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    apollo_id: Optional[str] = None
    loxo_id: Optional[str] = None

    # Professional
    current_title: Optional[str] = None
    current_company: Optional[str] = None
    headline: Optional[str] = None
    seniority_level: Optional[str] = None
    years_experience: Optional[float] = None
    industry: Optional[str] = None

    # Location
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    # Source-system attributes
    departments: Optional[List[str]] = None
    functions: Optional[List[str]] = None
    photo_url: Optional[str] = None

    # CV
    cv_file_url: Optional[str] = None
    cv_file_name: Optional[str] = None
    cv_parsed_text: Optional[str] = None

    # Skills & meta
    skills: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    contact_status: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    embedding_status: Optional[EmbeddingStatus] = None

    # Opaque JSON
    employment_history: Optional[Any] = None
    education: Optional[Any] = None
    custom_fields: Optional[Dict[str, Any]] = None
    apollo_raw_data: Optional[Dict[str, Any]] = None
    loxo_raw_data: Optional[Dict[str, Any]] = None


class CandidatePayload(CandidateFields):
    """Not-yet-persisted candidate data presented by an ingestion caller."""

    pass


class CandidateRecord(CandidateFields):
    """A candidate as stored. ``id`` is assigned by the store."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True, from_attributes=True)

    id: str
    last_synced_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProcessCandidateResponse(BaseModel):
    """Result of pushing one candidate through deduplication."""

    action: Literal["created", "updated"]
    candidate_id: str
    matched_on: Optional[str] = None
    ambiguous: bool = False
    candidate: CandidateRecord


class BulkIngestRequest(BaseModel):
    """Raw Apollo people or Loxo contacts to ingest in the background."""

    source: Literal["apollo", "loxo"]
    records: List[Dict[str, Any]] = Field(..., min_length=1)


class BulkIngestResponse(BaseModel):
    """Acknowledgement of an enqueued ingestion job."""

    job_id: str
    source: str
    record_count: int
