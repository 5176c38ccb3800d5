"""Tests for the background source ingestion task."""

import pytest

from recruitcrm.recruiting.services.candidate_ingestion import CandidateIngestionService
from workers.tasks.candidate_ingestion import ingest_source_records


@pytest.fixture
def ctx(engine, embedding_jobs):
    return {"ingestion_service": CandidateIngestionService(engine, embedding_jobs, batch_delay_seconds=0)}


class TestIngestSourceRecords:
    """ingest_source_records task."""

    @pytest.mark.anyio
    async def test_apollo_batch(self, ctx, store, apollo_person, embedding_jobs):
        result = await ingest_source_records(ctx, "apollo", [apollo_person])

        assert result["status"] == "completed"
        assert result["source"] == "apollo"
        assert result["created"] == 1
        assert result["embedding_jobs_queued"] == 1
        stored = next(iter(store.records.values()))
        assert stored.apollo_id == "5f2a9c"
        assert embedding_jobs.jobs[0]["priority"] == 200

    @pytest.mark.anyio
    async def test_identical_raw_records_processed_once(self, ctx, store, loxo_contact):
        reordered = dict(reversed(list(loxo_contact.items())))

        result = await ingest_source_records(ctx, "loxo", [loxo_contact, reordered])

        assert result["total"] == 2
        assert result["skipped_duplicates"] == 1
        assert result["processed"] == 1
        assert len(store.records) == 1

    @pytest.mark.anyio
    async def test_resync_merges_into_existing_candidate(self, ctx, store, loxo_contact):
        await ingest_source_records(ctx, "loxo", [loxo_contact])
        loxo_contact["tags"] = ["data", "hiring"]

        result = await ingest_source_records(ctx, "loxo", [loxo_contact])

        assert result["updated"] == 1
        assert len(store.records) == 1
        assert next(iter(store.records.values())).tags == ["data", "hiring"]

    @pytest.mark.anyio
    async def test_invalid_record_counted_as_error(self, ctx, store, loxo_contact):
        broken = {"id": 7, "first_name": "Bad", "years_experience": "lots"}

        result = await ingest_source_records(ctx, "loxo", [broken, loxo_contact])

        assert result["errors"] == 1
        assert result["processed"] == 1
        assert len(result["error_messages"]) == 1

    @pytest.mark.anyio
    async def test_malformed_nested_object_counted_as_error(self, ctx, store, apollo_person):
        broken = {"id": "x1", "organization": "Globex"}

        result = await ingest_source_records(ctx, "apollo", [broken, apollo_person])

        assert result["status"] == "completed"
        assert result["errors"] == 1
        assert result["processed"] == 1
        assert next(iter(store.records.values())).apollo_id == "5f2a9c"

    @pytest.mark.anyio
    async def test_malformed_phone_entry_counted_as_error(self, ctx, apollo_person):
        broken = {"id": "x2", "phone_numbers": ["+1555"]}

        result = await ingest_source_records(ctx, "apollo", [broken, apollo_person])

        assert result["errors"] == 1
        assert result["created"] == 1

    @pytest.mark.anyio
    async def test_unknown_source_fails(self, ctx, store):
        result = await ingest_source_records(ctx, "csv", [{"id": 1}])

        assert result["status"] == "failed"
        assert "csv" in result["error"]
        assert store.records == {}
