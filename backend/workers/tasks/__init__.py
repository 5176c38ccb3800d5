"""Background task definitions for ARQ workers."""

from workers.tasks.candidate_ingestion import ingest_source_records

# All available background tasks
BACKGROUND_TASKS = [
    ingest_source_records,
]
