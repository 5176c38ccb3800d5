"""Candidate Store - persistence contract used by the deduplication engine."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from pydantic import TypeAdapter

from recruitcrm.core.exceptions import ConflictError, StorageError
from recruitcrm.core.supabase_client import SupabaseClient
from recruitcrm.recruiting.schemas.candidate import CandidatePayload, CandidateRecord

logger = logging.getLogger(__name__)

CANDIDATES_TABLE = "candidates"

_update_adapter = TypeAdapter(Dict[str, Any])


class CandidateStore(Protocol):
    """Operations the deduplication engine needs from candidate storage."""

    async def create(self, payload: CandidatePayload) -> CandidateRecord:
        """Insert a candidate; the store assigns ``id`` and timestamps."""
        ...

    async def get_by_id(self, candidate_id: str) -> Optional[CandidateRecord]:
        ...

    async def update(
        self,
        candidate_id: str,
        fields: Dict[str, Any],
        expected_updated_at: Optional[datetime] = None,
    ) -> CandidateRecord:
        """Apply a field-level update and stamp ``updated_at``.

        When ``expected_updated_at`` is given the write only succeeds if the
        stored row still carries that timestamp, otherwise ``ConflictError``.
        """
        ...

    async def find_candidates_matching_any(
        self, payload: CandidatePayload
    ) -> List[CandidateRecord]:
        """Candidates sharing linkedin_url, email, or (full_name, current_company).

        Returns the union of the lookups without repeated ids.
        """
        ...


def identity_lookups(payload: CandidatePayload) -> List[Dict[str, Any]]:
    """Exact-match filters for every identity lookup the payload supports."""
    lookups: List[Dict[str, Any]] = []

    if payload.linkedin_url:
        lookups.append({"linkedin_url": payload.linkedin_url})

    if payload.email:
        lookups.append({"email": payload.email})

    if payload.full_name and payload.current_company:
        lookups.append({
            "full_name": payload.full_name,
            "current_company": payload.current_company,
        })

    return lookups


def unique_by_id(records: List[CandidateRecord]) -> List[CandidateRecord]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


class SupabaseCandidateStore:
    """Candidate store backed by the ``candidates`` table in Supabase."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def create(self, payload: CandidatePayload) -> CandidateRecord:
        row = await self.client.insert(
            CANDIDATES_TABLE,
            payload.model_dump(mode="json", exclude_none=True),
        )
        return CandidateRecord.model_validate(row)

    async def get_by_id(self, candidate_id: str) -> Optional[CandidateRecord]:
        row = await self.client.select(
            CANDIDATES_TABLE,
            "*",
            filters={"id": f"eq.{candidate_id}"},
            single=True,
        )
        return CandidateRecord.model_validate(row) if row else None

    async def update(
        self,
        candidate_id: str,
        fields: Dict[str, Any],
        expected_updated_at: Optional[datetime] = None,
    ) -> CandidateRecord:
        data = _update_adapter.dump_python(
            {**fields, "updated_at": datetime.now(timezone.utc)},
            mode="json",
        )

        filters: Dict[str, Any] = {"id": f"eq.{candidate_id}"}
        if expected_updated_at is not None:
            filters["updated_at"] = f"eq.{expected_updated_at.isoformat()}"

        row = await self.client.update(CANDIDATES_TABLE, data, filters=filters)

        if row is None:
            if expected_updated_at is not None:
                raise ConflictError(
                    f"Candidate {candidate_id} was modified concurrently",
                    details={"candidate_id": candidate_id},
                )
            raise StorageError(
                f"Candidate {candidate_id} could not be updated",
                details={"candidate_id": candidate_id},
            )

        return CandidateRecord.model_validate(row)

    async def find_candidates_matching_any(
        self, payload: CandidatePayload
    ) -> List[CandidateRecord]:
        lookups = identity_lookups(payload)
        if not lookups:
            return []

        # Explicit eq. so values like "in.jane@x.com" are not read as operators
        results = await asyncio.gather(*[
            self.client.select(
                CANDIDATES_TABLE,
                "*",
                filters={column: f"eq.{value}" for column, value in filters.items()},
            )
            for filters in lookups
        ])

        records = [
            CandidateRecord.model_validate(row)
            for rows in results
            for row in rows or []
        ]
        return unique_by_id(records)
