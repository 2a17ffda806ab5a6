"""
Ingestor

This package runs the ingestion pipeline end to end and owns the job store.

Key responsibilities:
- Fan (source, company) units out under a concurrency cap of 3
- Isolate failures per unit and per record
- Upsert jobs into PostgreSQL by (source, source_job_id)
- List stored jobs for readers
"""

from .db_operations import (
    DatabaseError,
    InMemoryJobStore,
    JobsDB,
    JobStore,
    PersistedJob,
    clamp_limit,
)
from .orchestrator import (
    MAX_CONCURRENT_UNITS,
    IngestionOrchestrator,
    IngestionRunResult,
    RunState,
    is_authorized,
    run_ingestion,
)

__all__ = [
    "MAX_CONCURRENT_UNITS",
    "DatabaseError",
    "InMemoryJobStore",
    "IngestionOrchestrator",
    "IngestionRunResult",
    "JobStore",
    "JobsDB",
    "PersistedJob",
    "RunState",
    "clamp_limit",
    "is_authorized",
    "run_ingestion",
]
__version__ = "0.1.0"
