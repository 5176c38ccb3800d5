"""Candidate Deduplication Engine.

Applied to every candidate import: Apollo scrapes, Loxo syncs, CV uploads and
manual additions. Each incoming payload is resolved against the store and
either inserted or merged into the best existing match.

Matching rules, evaluated in order per existing candidate (first hit wins,
rules are never combined):
1. LinkedIn URL exact match        - 0.95
2. Email exact match               - 0.90
3. Apollo id match                 - 0.85
4. Loxo id match                   - 0.85
5. Full name (fuzzy) + company     - 0.75
6. Phone exact match               - 0.70

Concurrency: there is no cross-call locking. Two concurrent calls for the
same person can both miss each other and create two records, or merge one
after the other with last-write-wins on overlapping fields. Enable
optimistic locking to turn the second merge into a ``ConflictError``.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

from recruitcrm.config import get_settings
from recruitcrm.core.exceptions import StorageError
from recruitcrm.recruiting.schemas.candidate import (
    CandidateFields,
    CandidatePayload,
    CandidateRecord,
)
from recruitcrm.recruiting.services.candidate_merge import merge_candidate_fields
from recruitcrm.recruiting.services.candidate_store import CandidateStore
from recruitcrm.recruiting.services.name_similarity import name_similarity

logger = logging.getLogger(__name__)

NAME_SIMILARITY_THRESHOLD = 0.8

SIGNIFICANT_FIELDS = (
    "headline",
    "skills",
    "employment_history",
    "current_title",
    "current_company",
    "cv_parsed_text",
)


class MatchReason(str, Enum):
    """Which rule matched an incoming payload to a stored candidate."""
    LINKEDIN_URL_EXACT = "linkedin_url_exact_match"
    EMAIL_EXACT = "email_exact_match"
    APOLLO_ID = "apollo_id_match"
    LOXO_ID = "loxo_id_match"
    NAME_COMPANY = "name_company_match"
    PHONE = "phone_match"
    NO_MATCH = "no_match"


@dataclass
class MatchResult:
    """A pool candidate paired with its confidence score."""
    candidate: CandidateRecord
    confidence: float
    reason: MatchReason


@dataclass
class DeduplicationResult:
    """Outcome of processing one candidate."""
    candidate: CandidateRecord
    action: str  # 'created' or 'updated'
    matched_on: Optional[str] = None
    confidence: float = 0.0
    ambiguous: bool = False  # several pool candidates tied on the top score
    previous: Optional[CandidateRecord] = None  # stored state before the merge


def calculate_match_confidence(
    payload: CandidateFields, existing: CandidateRecord
) -> Tuple[float, MatchReason]:
    """Score one stored candidate against the payload."""
    if payload.linkedin_url and existing.linkedin_url == payload.linkedin_url:
        return 0.95, MatchReason.LINKEDIN_URL_EXACT

    if payload.email and existing.email == payload.email:
        return 0.90, MatchReason.EMAIL_EXACT

    if payload.apollo_id and existing.apollo_id == payload.apollo_id:
        return 0.85, MatchReason.APOLLO_ID

    if payload.loxo_id and existing.loxo_id == payload.loxo_id:
        return 0.85, MatchReason.LOXO_ID

    if (
        payload.full_name
        and payload.current_company
        and existing.full_name
        and existing.current_company == payload.current_company
        and name_similarity(payload.full_name, existing.full_name) > NAME_SIMILARITY_THRESHOLD
    ):
        return 0.75, MatchReason.NAME_COMPANY

    if payload.phone and existing.phone == payload.phone:
        return 0.70, MatchReason.PHONE

    return 0.0, MatchReason.NO_MATCH


def find_best_match(
    payload: CandidateFields, pool: List[CandidateRecord]
) -> Tuple[MatchResult, bool]:
    """Pick the highest-confidence candidate from a non-empty pool.

    Ties go to the smallest id so the choice does not depend on the order the
    store returned rows in. The second element is True when a tie occurred.
    """
    matches = []
    for candidate in pool:
        confidence, reason = calculate_match_confidence(payload, candidate)
        matches.append(MatchResult(candidate=candidate, confidence=confidence, reason=reason))

    top_confidence = max(m.confidence for m in matches)
    tied = [m for m in matches if m.confidence == top_confidence]
    best = min(tied, key=lambda m: m.candidate.id)

    return best, len(tied) > 1


def _sorted_values(values: List[Any]) -> List[Any]:
    return sorted(values, key=lambda v: json.dumps(v, sort_keys=True, default=str))


def _values_differ(existing: Any, proposed: Any) -> bool:
    if isinstance(existing, list) and isinstance(proposed, list):
        return _sorted_values(existing) != _sorted_values(proposed)
    return existing != proposed


def has_significant_changes(existing: CandidateRecord, proposed: CandidateFields) -> bool:
    """Whether a proposed update would change fields that feed the embeddings.

    Only fields the proposal actually supplies are compared. Lists compare by
    sorted values, dicts by deep equality, everything else by equality.
    """
    for field in SIGNIFICANT_FIELDS:
        proposed_value = getattr(proposed, field)
        if proposed_value is None:
            continue
        if _values_differ(getattr(existing, field), proposed_value):
            return True
    return False


def generate_content_hash(content: str) -> str:
    """SHA-256 hex digest used as an embedding/content dedup key."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class DeduplicationEngine:
    """Resolves incoming candidates against the store and creates or merges."""

    def __init__(
        self,
        store: CandidateStore,
        merge_on_zero_confidence: bool = False,
        optimistic_locking: bool = False,
    ):
        self.store = store
        self.merge_on_zero_confidence = merge_on_zero_confidence
        self.optimistic_locking = optimistic_locking

    async def process_candidate(self, payload: CandidatePayload) -> DeduplicationResult:
        """Create a new candidate or merge into the best existing match.

        Raises:
            StorageError: the store failed to create, fetch or update.
            ConflictError: optimistic locking is on and the row changed first.
        """
        pool = await self.store.find_candidates_matching_any(payload)

        if not pool:
            return await self._create(payload)

        best, ambiguous = find_best_match(payload, pool)

        if best.confidence == 0 and not self.merge_on_zero_confidence:
            logger.info(
                f"No rule matched any of {len(pool)} pool candidates - creating new candidate"
            )
            return await self._create(payload)

        if ambiguous:
            logger.warning(
                f"Ambiguous match: several candidates scored {best.confidence:.2f}, "
                f"picked {best.candidate.id} ({best.reason.value})"
            )

        return await self._merge(best, payload, ambiguous)

    async def _create(self, payload: CandidatePayload) -> DeduplicationResult:
        candidate = await self.store.create(payload)
        logger.info(f"Created candidate {candidate.id} (source: {payload.source})")
        return DeduplicationResult(candidate=candidate, action="created")

    async def _merge(
        self, best: MatchResult, payload: CandidatePayload, ambiguous: bool
    ) -> DeduplicationResult:
        existing = await self.store.get_by_id(best.candidate.id)
        if existing is None:
            raise StorageError(
                f"Candidate {best.candidate.id} disappeared before merge",
                details={"candidate_id": best.candidate.id},
            )

        updates = merge_candidate_fields(existing, payload, datetime.now(timezone.utc))
        expected_updated_at = existing.updated_at if self.optimistic_locking else None

        candidate = await self.store.update(
            existing.id,
            updates,
            expected_updated_at=expected_updated_at,
        )

        logger.info(
            f"Updated candidate {candidate.id} - matched on {best.reason.value} "
            f"(confidence {best.confidence:.2f})"
        )

        return DeduplicationResult(
            candidate=candidate,
            action="updated",
            matched_on=best.reason.value,
            confidence=best.confidence,
            ambiguous=ambiguous,
            previous=existing,
        )


def get_deduplication_engine(store: CandidateStore) -> DeduplicationEngine:
    """Build an engine for ``store`` using the configured dedup options."""
    settings = get_settings()
    return DeduplicationEngine(
        store,
        merge_on_zero_confidence=settings.dedup_merge_on_zero_confidence,
        optimistic_locking=settings.dedup_optimistic_locking,
    )
