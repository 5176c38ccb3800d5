"""Field-level merge of an incoming payload into a stored candidate.

Each candidate field has a fixed kind that decides how it merges:

- SCALAR: incoming value wins when the stored one is empty or different
- ARRAY: union of both lists by value equality, stored order first
- JSON: union when both sides are lists, otherwise merged like a scalar
- RAW_BLOB: source-system snapshot, replaced wholesale whenever supplied
- TIMESTAMP: stamped by the merge itself, never taken from the payload

A ``None`` in the payload never overwrites anything.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from recruitcrm.recruiting.schemas.candidate import CandidatePayload, CandidateRecord


class FieldKind(Enum):
    """How a candidate field behaves during a merge."""
    SCALAR = "scalar"
    ARRAY = "array"
    JSON = "json"
    RAW_BLOB = "raw_blob"
    TIMESTAMP = "timestamp"


CANDIDATE_FIELD_KINDS: Dict[str, FieldKind] = {
    "source": FieldKind.SCALAR,
    "external_id": FieldKind.SCALAR,
    "first_name": FieldKind.SCALAR,
    "last_name": FieldKind.SCALAR,
    "full_name": FieldKind.SCALAR,
    "email": FieldKind.SCALAR,
    "phone": FieldKind.SCALAR,
    "linkedin_url": FieldKind.SCALAR,
    "apollo_id": FieldKind.SCALAR,
    "loxo_id": FieldKind.SCALAR,
    "current_title": FieldKind.SCALAR,
    "current_company": FieldKind.SCALAR,
    "headline": FieldKind.SCALAR,
    "seniority_level": FieldKind.SCALAR,
    "years_experience": FieldKind.SCALAR,
    "industry": FieldKind.SCALAR,
    "city": FieldKind.SCALAR,
    "state": FieldKind.SCALAR,
    "country": FieldKind.SCALAR,
    "departments": FieldKind.ARRAY,
    "functions": FieldKind.ARRAY,
    "photo_url": FieldKind.SCALAR,
    "cv_file_url": FieldKind.SCALAR,
    "cv_file_name": FieldKind.SCALAR,
    "cv_parsed_text": FieldKind.SCALAR,
    "skills": FieldKind.ARRAY,
    "tags": FieldKind.ARRAY,
    "contact_status": FieldKind.SCALAR,
    "priority": FieldKind.SCALAR,
    "status": FieldKind.SCALAR,
    "embedding_status": FieldKind.SCALAR,
    "employment_history": FieldKind.JSON,
    "education": FieldKind.JSON,
    "custom_fields": FieldKind.JSON,
    "apollo_raw_data": FieldKind.RAW_BLOB,
    "loxo_raw_data": FieldKind.RAW_BLOB,
    "last_synced_at": FieldKind.TIMESTAMP,
}


def union_by_value(existing: List[Any], incoming: List[Any]) -> List[Any]:
    """Union two lists keeping the first occurrence of each value.

    Uses equality rather than hashing so lists of dicts merge too.
    """
    merged: List[Any] = []
    for item in [*existing, *incoming]:
        if item not in merged:
            merged.append(item)
    return merged


def _merge_scalar(existing: Any, incoming: Any) -> Any:
    if existing is None or existing != incoming:
        return incoming
    return existing


def merge_field(kind: FieldKind, existing: Any, incoming: Any) -> Any:
    """Merge one non-None incoming value into the stored value."""
    if kind is FieldKind.RAW_BLOB:
        return incoming

    if kind in (FieldKind.ARRAY, FieldKind.JSON):
        if isinstance(existing, list) and isinstance(incoming, list):
            return union_by_value(existing, incoming)

    return _merge_scalar(existing, incoming)


def merge_candidate_fields(
    existing: CandidateRecord,
    incoming: CandidatePayload,
    now: datetime,
) -> Dict[str, Any]:
    """Compute the field updates that merge ``incoming`` into ``existing``.

    Returns only fields whose value changes, raw blobs the payload supplies,
    and ``last_synced_at`` which is always stamped to ``now``.
    """
    updates: Dict[str, Any] = {}

    for field, kind in CANDIDATE_FIELD_KINDS.items():
        if kind is FieldKind.TIMESTAMP:
            continue

        incoming_value = getattr(incoming, field)
        if incoming_value is None:
            continue

        existing_value = getattr(existing, field)
        merged_value = merge_field(kind, existing_value, incoming_value)

        if kind is FieldKind.RAW_BLOB or merged_value != existing_value:
            updates[field] = merged_value

    updates["last_synced_at"] = now
    return updates
