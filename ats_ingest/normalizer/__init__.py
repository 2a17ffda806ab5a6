"""
Normalizer

This package transforms raw job postings from the ATS adapters into the
canonical NormalizedJob record.

Key responsibilities:
- Resolve URL and posting date through a fixed field priority
- Keep only target data/analytics roles
- Flag remote-friendly locations
- Drop postings older than the recency window
"""

from .normalize import (
    RELEVANT_TITLES,
    REMOTE_KEYWORDS,
    NormalizedJob,
    normalize_job,
    parse_timestamp,
)
from .recency import RECENCY_WINDOW_DAYS, filter_recent, process_jobs

__all__ = [
    "RECENCY_WINDOW_DAYS",
    "RELEVANT_TITLES",
    "REMOTE_KEYWORDS",
    "NormalizedJob",
    "filter_recent",
    "normalize_job",
    "parse_timestamp",
    "process_jobs",
]
__version__ = "0.1.0"
