"""Convert raw Apollo people and Loxo contacts into candidate payloads.

Recruiter workflow fields (contact_status, priority, status) and
embedding_status are left to database defaults so that a re-sync merging into
an existing candidate never resets them.
"""

import copy
import json
from typing import Any, Dict, List, Optional

from recruitcrm.recruiting.schemas.candidate import CandidatePayload, CandidateSource
from recruitcrm.recruiting.services.candidate_deduplication import generate_content_hash


def generate_data_hash(record: Dict[str, Any]) -> str:
    """Stable hash of a raw source record (key order does not matter)."""
    return generate_content_hash(json.dumps(record, sort_keys=True, default=str))


def _as_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _full_name(first_name: Optional[str], last_name: Optional[str], name: Optional[str] = None) -> Optional[str]:
    if name:
        return name
    parts = [p for p in (first_name, last_name) if p]
    return " ".join(parts) if parts else None


def _string_list(values: Any) -> Optional[List[str]]:
    if not values:
        return None
    return [str(v) for v in values]


def apollo_person_to_payload(person: Dict[str, Any]) -> CandidatePayload:
    """Map an Apollo person record onto the candidate payload."""
    organization = person.get("organization") or {}
    phone_numbers = person.get("phone_numbers") or []

    return CandidatePayload(
        source=CandidateSource.APOLLO,
        external_id=_as_str(person.get("id")),
        apollo_id=_as_str(person.get("id")),
        first_name=person.get("first_name"),
        last_name=person.get("last_name"),
        full_name=_full_name(person.get("first_name"), person.get("last_name"), person.get("name")),
        email=person.get("email"),
        phone=phone_numbers[0].get("raw_number") if phone_numbers else None,
        linkedin_url=person.get("linkedin_url"),
        current_title=person.get("title"),
        current_company=organization.get("name"),
        headline=person.get("headline"),
        seniority_level=person.get("seniority"),
        industry=organization.get("industry"),
        city=person.get("city"),
        state=person.get("state"),
        country=person.get("country"),
        departments=_string_list(person.get("departments")),
        functions=_string_list(person.get("functions")),
        photo_url=person.get("photo_url"),
        skills=_string_list(person.get("skills")),
        education=copy.deepcopy(person.get("education")),
        employment_history=copy.deepcopy(person.get("employment_history")),
        apollo_raw_data=copy.deepcopy(person),
    )


def loxo_contact_to_payload(contact: Dict[str, Any]) -> CandidatePayload:
    """Map a Loxo contact record onto the candidate payload."""
    return CandidatePayload(
        source=CandidateSource.LOXO,
        external_id=_as_str(contact.get("id")),
        loxo_id=_as_str(contact.get("id")),
        first_name=contact.get("first_name"),
        last_name=contact.get("last_name"),
        full_name=_full_name(contact.get("first_name"), contact.get("last_name"), contact.get("name")),
        email=contact.get("email"),
        phone=contact.get("phone"),
        linkedin_url=contact.get("linkedin_url"),
        current_title=contact.get("current_title") or contact.get("title"),
        current_company=contact.get("current_company") or contact.get("company"),
        headline=contact.get("headline") or contact.get("summary"),
        seniority_level=contact.get("seniority_level"),
        years_experience=contact.get("years_experience"),
        industry=contact.get("industry"),
        city=contact.get("city"),
        state=contact.get("state"),
        country=contact.get("country"),
        skills=_string_list(contact.get("skills")),
        tags=_string_list(contact.get("tags")),
        education=copy.deepcopy(contact.get("education")),
        employment_history=copy.deepcopy(contact.get("work_history")),
        loxo_raw_data=copy.deepcopy(contact),
    )


SOURCE_NORMALIZERS = {
    CandidateSource.APOLLO.value: apollo_person_to_payload,
    CandidateSource.LOXO.value: loxo_contact_to_payload,
}
