"""
Recency filtering for normalized jobs.

Jobs posted more than RECENCY_WINDOW_DAYS ago are dropped. Jobs whose posting
date could not be determined are kept: they are undated, not stale.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..source_extractor.base import RawJob
from .normalize import NormalizedJob, normalize_job

logger = logging.getLogger(__name__)

RECENCY_WINDOW_DAYS = 14


def recency_cutoff(now: Optional[datetime] = None) -> datetime:
    """Return the oldest posting time still considered recent."""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=RECENCY_WINDOW_DAYS)


def filter_recent(
    jobs: Sequence[NormalizedJob],
    apply_filter: bool = True,
    now: Optional[datetime] = None,
) -> list[NormalizedJob]:
    """
    Drop jobs posted before the recency cutoff.

    Args:
        jobs: Normalized jobs
        apply_filter: When False, jobs pass through unchanged (backfills)
        now: Reference time for the cutoff (defaults to the current time)

    Returns:
        Jobs that are undated or posted on/after the cutoff, in input order
    """
    if not apply_filter:
        return list(jobs)

    cutoff = recency_cutoff(now)
    recent = [job for job in jobs if job.posted_at is None or job.posted_at >= cutoff]

    dropped = len(jobs) - len(recent)
    if dropped:
        logger.debug(
            "Dropped stale jobs",
            extra={"dropped": dropped, "cutoff": cutoff.isoformat()},
        )
    return recent


def process_jobs(
    raw_jobs: Iterable[RawJob],
    source: str,
    company: str,
    apply_filter: bool = True,
    now: Optional[datetime] = None,
) -> list[NormalizedJob]:
    """Normalize raw jobs and apply the recency filter."""
    normalized = [
        job
        for job in (normalize_job(raw, source, company) for raw in raw_jobs)
        if job is not None
    ]
    return filter_recent(normalized, apply_filter=apply_filter, now=now)
