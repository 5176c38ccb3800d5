"""Candidate Ingestion Task - Background job for Apollo/Loxo record batches."""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from recruitcrm.recruiting.schemas.candidate import CandidatePayload
from recruitcrm.recruiting.services.candidate_ingestion import CandidateIngestionService
from recruitcrm.recruiting.services.source_normalizers import (
    SOURCE_NORMALIZERS,
    generate_data_hash,
)

logger = logging.getLogger(__name__)


async def ingest_source_records(
    ctx: Dict[str, Any],
    source: str,  # 'apollo' or 'loxo'
    records: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Background task to normalize raw source records and ingest them.

    Identical raw records within one job are processed once. Records that
    fail to normalize, through invalid values or malformed nested objects,
    are counted as errors without stopping the job.

    Args:
        ctx: ARQ context, carries the ``ingestion_service`` built at startup
        source: 'apollo' or 'loxo'
        records: Raw records as returned by the source API

    Returns:
        Dict with ingestion status and counters
    """
    logger.info(f"Ingesting {len(records)} {source} records")

    normalizer = SOURCE_NORMALIZERS.get(source)
    if normalizer is None:
        logger.warning(f"Ingestion skipped - unknown source: {source}")
        return {
            "source": source,
            "status": "failed",
            "error": f"Unknown source: {source}",
        }

    service: CandidateIngestionService = ctx["ingestion_service"]

    payloads: List[CandidatePayload] = []
    seen_hashes = set()
    skipped_duplicates = 0
    normalize_errors: List[str] = []

    for record in records:
        data_hash = generate_data_hash(record)
        if data_hash in seen_hashes:
            skipped_duplicates += 1
            continue
        seen_hashes.add(data_hash)

        try:
            payloads.append(normalizer(record))
        except (PydanticValidationError, AttributeError, TypeError) as e:
            logger.error(f"Could not normalize {source} record {record.get('id')}: {e}")
            normalize_errors.append(str(e))

    summary = await service.ingest(payloads)
    summary.total = len(records)
    summary.skipped_duplicates = skipped_duplicates
    summary.errors += len(normalize_errors)
    summary.error_messages = normalize_errors + summary.error_messages

    logger.info(
        f"{source} ingestion finished: created {summary.created}, "
        f"updated {summary.updated}, errors {summary.errors}, "
        f"skipped duplicates {summary.skipped_duplicates}"
    )

    return {
        "source": source,
        "status": "completed",
        **summary.to_dict(),
    }
