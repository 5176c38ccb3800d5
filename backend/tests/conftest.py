"""Pytest configuration and fixtures for RecruitCRM tests."""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("INGESTION_BATCH_DELAY_SECONDS", "0")

from recruitcrm.core.exceptions import ConflictError, StorageError  # noqa: E402
from recruitcrm.recruiting.schemas.candidate import CandidatePayload, CandidateRecord  # noqa: E402
from recruitcrm.recruiting.services.candidate_deduplication import DeduplicationEngine  # noqa: E402
from recruitcrm.recruiting.services.candidate_store import identity_lookups, unique_by_id  # noqa: E402


class InMemoryCandidateStore:
    """Candidate store fake keeping records in a dict, in insertion order."""

    def __init__(self, records: Optional[List[CandidateRecord]] = None):
        self.records: Dict[str, CandidateRecord] = {}
        self.fail_on: set = set()
        self.update_calls: List[Dict[str, Any]] = []
        for record in records or []:
            self.records[record.id] = record

    async def create(self, payload: CandidatePayload) -> CandidateRecord:
        if "create" in self.fail_on:
            raise StorageError("create failed")
        now = datetime.now(timezone.utc)
        record = CandidateRecord(
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
            **payload.model_dump(exclude_none=True),
        )
        self.records[record.id] = record
        return record

    async def get_by_id(self, candidate_id: str) -> Optional[CandidateRecord]:
        if "get_by_id" in self.fail_on:
            raise StorageError("fetch failed")
        return self.records.get(candidate_id)

    async def update(
        self,
        candidate_id: str,
        fields: Dict[str, Any],
        expected_updated_at: Optional[datetime] = None,
    ) -> CandidateRecord:
        if "update" in self.fail_on:
            raise StorageError("update failed")
        record = self.records.get(candidate_id)
        if record is None:
            raise StorageError(f"Candidate {candidate_id} could not be updated")
        if expected_updated_at is not None and record.updated_at != expected_updated_at:
            raise ConflictError(f"Candidate {candidate_id} was modified concurrently")

        self.update_calls.append({"id": candidate_id, "fields": fields})
        updated = record.model_copy(update={**fields, "updated_at": datetime.now(timezone.utc)})
        self.records[candidate_id] = updated
        return updated

    async def find_candidates_matching_any(self, payload: CandidatePayload) -> List[CandidateRecord]:
        if "find" in self.fail_on:
            raise StorageError("lookup failed")
        matches = []
        for filters in identity_lookups(payload):
            for record in self.records.values():
                if all(getattr(record, column) == value for column, value in filters.items()):
                    matches.append(record)
        return unique_by_id(matches)


class RecordingEmbeddingJobs:
    """Embedding job service fake that records queued jobs."""

    def __init__(self):
        self.jobs: List[Dict[str, Any]] = []

    async def queue_embedding_job(self, candidate_id, job_type="profile", priority=100):
        self.jobs.append({"candidate_id": candidate_id, "job_type": job_type, "priority": priority})
        return f"job-{len(self.jobs)}"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio for async tests."""
    return "asyncio"


@pytest.fixture
def store() -> InMemoryCandidateStore:
    """Empty in-memory candidate store."""
    return InMemoryCandidateStore()


@pytest.fixture
def engine(store: InMemoryCandidateStore) -> DeduplicationEngine:
    """Deduplication engine over the in-memory store."""
    return DeduplicationEngine(store)


@pytest.fixture
def embedding_jobs() -> RecordingEmbeddingJobs:
    return RecordingEmbeddingJobs()


@pytest.fixture
def ann_lee() -> CandidateRecord:
    """Stored candidate used by the merge scenario tests."""
    return CandidateRecord(
        id="1",
        source="manual",
        linkedin_url="li/a",
        email="a@x.com",
        full_name="Ann Lee",
        current_company="Acme",
        skills=["SQL"],
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def apollo_person() -> dict:
    """Apollo person record as returned by the people search API."""
    return {
        "id": "5f2a9c",
        "first_name": "Jane",
        "last_name": "Doe",
        "name": "Jane Doe",
        "email": "jane.doe@example.com",
        "phone_numbers": [{"raw_number": "+31 6 1234 5678"}],
        "linkedin_url": "http://www.linkedin.com/in/janedoe",
        "title": "Staff Engineer",
        "headline": "Staff Engineer at Globex",
        "seniority": "senior",
        "city": "Amsterdam",
        "country": "Netherlands",
        "departments": ["engineering"],
        "functions": ["engineering"],
        "organization": {"id": "org-1", "name": "Globex", "industry": "Software"},
        "employment_history": [{"organization_name": "Globex", "title": "Staff Engineer"}],
    }


@pytest.fixture
def loxo_contact() -> dict:
    """Loxo contact record as returned by the contacts API."""
    return {
        "id": 48213,
        "first_name": "Sam",
        "last_name": "Okafor",
        "email": "sam@okafor.dev",
        "phone": "+44 20 7946 0000",
        "title": "Data Lead",
        "company": "Initech",
        "summary": "Data platform lead",
        "skills": ["Python", "dbt"],
        "tags": ["data"],
        "work_history": [{"company": "Initech", "title": "Data Lead"}],
    }
