"""
Ingestion Orchestrator

Drives one ingestion run: every configured (source, company) pair becomes a
unit of work. Units run on a bounded thread pool; each unit fetches from its
adapter, normalizes and filters the postings, then upserts the survivors one
by one.

Failure isolation:
- A unit that raises records one `source/company` failure
- A record that fails to upsert records one `source/company/sourceJobId`
  failure and the unit moves on to the next record
- Neither ever stops the other units

The run always waits for every dispatched unit before returning.
"""

import enum
import logging
import secrets
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..normalizer.recency import process_jobs
from ..source_extractor.adapters import UnknownSourceError, build_adapters
from ..source_extractor.base import SourceAdapter
from .db_operations import JobStore

logger = logging.getLogger(__name__)

# At most this many units do network/database work at the same time
MAX_CONCURRENT_UNITS = 3


class RunState(enum.Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    COLLECTING = "collecting"
    COMPLETED = "completed"


@dataclass
class UnitResult:
    """Outcome of a single (source, company) unit."""

    source: str
    company: str
    ingested: int = 0
    failed: list[str] = field(default_factory=list)


@dataclass
class IngestionRunResult:
    """Aggregate outcome of one ingestion run."""

    total_ingested: int = 0
    failed: list[str] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.error:
            return f"Ingestion failed: {self.error}"
        message = f"Ingested {self.total_ingested} jobs"
        if self.failed:
            message += f", {len(self.failed)} failed"
        return message

    def to_dict(self) -> dict[str, Any]:
        """Render the result for the invoking caller."""
        result: dict[str, Any] = {
            "success": self.success,
            "totalIngested": self.total_ingested,
            "failed": list(self.failed),
            "message": self.message,
        }
        if self.error:
            result["error"] = self.error
        return result


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IngestionOrchestrator:
    """
    Fans (source, company) units out onto a bounded worker pool and
    collects a single IngestionRunResult.

    Example:
        orchestrator = IngestionOrchestrator(store=JobsDB(database_url))
        result = orchestrator.run(config.units())
        print(result.to_dict())
    """

    def __init__(
        self,
        store: JobStore,
        adapters: Optional[Mapping[str, SourceAdapter]] = None,
        apply_date_filter: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Job store exposing upsert_job()
            adapters: Adapter per source name (defaults to the built-in ATS adapters)
            apply_date_filter: Whether to drop jobs older than the recency window
            clock: Source of the run's reference time
        """
        self.store = store
        self.adapters = dict(adapters) if adapters is not None else build_adapters()
        self.apply_date_filter = apply_date_filter
        self.clock = clock
        self.state = RunState.IDLE

    def _set_state(self, state: RunState) -> None:
        self.state = state
        logger.debug("Ingestion run state: %s", state.value)

    def run(self, units: Iterable[tuple[str, str]]) -> IngestionRunResult:
        """
        Execute one ingestion run.

        Args:
            units: (source, company) pairs. Enumerating them may raise; that
                is treated as a fatal configuration error, reported in the
                result after already-dispatched units finish.

        Returns:
            IngestionRunResult with the total upserted count and failures
        """
        # One reference time for the whole run keeps the cutoff consistent
        now = self.clock()
        result = IngestionRunResult()
        futures: list[Future] = []

        logger.info(
            "Starting ingestion run",
            extra={
                "apply_date_filter": self.apply_date_filter,
                "max_concurrent_units": MAX_CONCURRENT_UNITS,
            },
        )

        with ThreadPoolExecutor(
            max_workers=MAX_CONCURRENT_UNITS, thread_name_prefix="ingest-unit"
        ) as executor:
            self._set_state(RunState.DISPATCHING)
            try:
                for source, company in units:
                    futures.append(executor.submit(self._run_unit, source, company, now))
            except Exception as e:
                result.success = False
                result.error = str(e) or type(e).__name__
                logger.error(
                    "Fatal error enumerating configured units",
                    extra={"error": str(e), "error_type": type(e).__name__},
                    exc_info=True,
                )

            self._set_state(RunState.COLLECTING)
            for future in futures:
                unit = future.result()
                result.total_ingested += unit.ingested
                result.failed.extend(unit.failed)

        self._set_state(RunState.COMPLETED)
        logger.info(
            result.message,
            extra={
                "units": len(futures),
                "total_ingested": result.total_ingested,
                "failed_count": len(result.failed),
                "run_success": result.success,
            },
        )
        return result

    def _run_unit(self, source: str, company: str, now: datetime) -> UnitResult:
        """Fetch, normalize and upsert one (source, company) unit. Never raises."""
        unit = UnitResult(source=source, company=company)

        try:
            adapter = self.adapters.get(source)
            if adapter is None:
                raise UnknownSourceError(f"No adapter registered for source '{source}'")

            raw_jobs = adapter.fetch(company)
            jobs = process_jobs(
                raw_jobs,
                source,
                company,
                apply_filter=self.apply_date_filter,
                now=now,
            )
        except Exception as e:
            logger.error(
                "Failed to process %s/%s: %s",
                source,
                company,
                e,
                extra={
                    "source": source,
                    "company": company,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            unit.failed.append(f"{source}/{company}")
            return unit

        for job in jobs:
            try:
                self.store.upsert_job(job)
                unit.ingested += 1
            except Exception as e:
                logger.error(
                    "Error upserting job %s from %s: %s",
                    job.source_job_id,
                    source,
                    e,
                    extra={
                        "source": source,
                        "company": company,
                        "source_job_id": job.source_job_id,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                unit.failed.append(f"{source}/{company}/{job.source_job_id}")

        logger.info(
            "Processed %s/%s",
            source,
            company,
            extra={
                "source": source,
                "company": company,
                "fetched": len(raw_jobs),
                "kept": len(jobs),
                "ingested": unit.ingested,
            },
        )
        return unit


def is_authorized(auth_header: Optional[str], cron_secret: Optional[str]) -> bool:
    """
    Check a trigger's credential against the shared secret.

    With no secret configured every invocation is authorized; otherwise the
    header must be exactly "Bearer <secret>".
    """
    if not cron_secret:
        return True
    if not auth_header:
        return False
    return secrets.compare_digest(auth_header, f"Bearer {cron_secret}")


def run_ingestion(
    units: Iterable[tuple[str, str]],
    store: JobStore,
    authorized: bool,
    adapters: Optional[Mapping[str, SourceAdapter]] = None,
    apply_date_filter: bool = True,
) -> IngestionRunResult:
    """
    Trigger-level entry point: run ingestion if the invocation is authorized.

    Returns:
        IngestionRunResult; an unauthorized call does no work and reports
        success=False with error "Unauthorized"
    """
    if not authorized:
        logger.warning("Rejected unauthorized ingestion trigger")
        return IngestionRunResult(success=False, error="Unauthorized")

    orchestrator = IngestionOrchestrator(
        store=store,
        adapters=adapters,
        apply_date_filter=apply_date_filter,
    )
    return orchestrator.run(units)
