"""
Job Posting Normalization Logic

This module turns a RawJob from any ATS adapter into the canonical
NormalizedJob record, or rejects it. It is source-agnostic: every ambiguity
between providers (which URL, which timestamp) is resolved through a fixed
priority order over the candidate fields.

Steps, in order:
1. Resolve the posting URL (reject if none)
2. Check title relevance against target roles (reject if no match)
3. Detect remote-friendly locations
4. Resolve the best available posting date (absent is fine)
5. Build the record with trimmed title and location
"""

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from ..source_extractor.base import DATE_FIELDS, URL_FIELDS, RawJob

logger = logging.getLogger(__name__)


# Keywords that indicate a job is remote-friendly
REMOTE_KEYWORDS = ("remote", "distributed", "anywhere", "virtual", "home-based")

# Target job titles (case-insensitive substring match)
RELEVANT_TITLES = (
    "data analyst",
    "bi analyst",
    "business intelligence",
    "bi engineer",
    "analytics engineer",
    "data engineer",
    "data scientist",
)

# Numeric timestamps above this are epoch milliseconds (Lever), else seconds
_EPOCH_MILLIS_THRESHOLD = 1e11
# Digit strings below this (e.g. "20240101") are not treated as epoch values
_EPOCH_SECONDS_MIN = 1e9
_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")


@dataclass(frozen=True)
class NormalizedJob:
    """Canonical job record. `(source, source_job_id)` is the natural key."""

    source: str
    source_job_id: str
    company: str
    title: str
    url: str
    location: str
    remote: bool
    posted_at: Optional[datetime] = None

    @property
    def natural_key(self) -> tuple[str, str]:
        return self.source, self.source_job_id

    def to_record(self) -> dict[str, Any]:
        """Return the record as a dict of column values."""
        return asdict(self)


def is_relevant_title(title: str) -> bool:
    """Check if a job title matches a target position."""
    lower_title = title.lower()
    return any(keyword in lower_title for keyword in RELEVANT_TITLES)


def is_remote(location: str) -> bool:
    """Detect if a job is remote based on its location string."""
    lower_location = location.lower()
    return any(keyword in lower_location for keyword in REMOTE_KEYWORDS)


def resolve_url(raw: RawJob) -> str:
    """Return the first non-empty URL candidate, or ""."""
    for name in URL_FIELDS:
        value = raw.get(name).strip()
        if value:
            return value
    return ""


def resolve_posted_at(raw: RawJob) -> Optional[datetime]:
    """
    Extract the best available date from a raw job.

    Priority: posted_at > updated_at > updatedAt > created_at > createdAt.
    The first candidate that parses wins; unparseable candidates are skipped.
    """
    for name in DATE_FIELDS:
        parsed = parse_timestamp(raw.get(name))
        if parsed is not None:
            return parsed
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp value into a timezone-aware datetime.

    Supports:
    - ISO 8601 strings (e.g., "2024-01-01T00:00:00Z", "2024-01-01")
    - Unix timestamps in seconds or milliseconds, as numbers or digit strings
      (strings only from 1e9 up, so compact dates are not read as epochs)
    - datetime objects (passed through)
    - None / "" (returns None)

    Naive values are assumed to be UTC.

    Args:
        value: Timestamp value to parse

    Returns:
        datetime object or None if invalid/missing
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) or (
        isinstance(value, str)
        and _NUMERIC_RE.match(value.strip())
        and float(value) >= _EPOCH_SECONDS_MIN
    ):
        epoch = float(value)
        if abs(epoch) > _EPOCH_MILLIS_THRESHOLD:
            epoch /= 1000.0
        try:
            return datetime.fromtimestamp(epoch, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            logger.debug("Failed to parse Unix timestamp", extra={"value": value})
            return None
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Failed to parse timestamp string", extra={"value": value})
            return None
    else:
        logger.debug(
            "Unsupported timestamp type",
            extra={"value": value, "type": type(value).__name__},
        )
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_job(raw: RawJob, source: str, company: str) -> Optional[NormalizedJob]:
    """
    Normalize a raw job into a NormalizedJob.

    Args:
        raw: RawJob produced by a source adapter
        source: Source name (e.g. "greenhouse")
        company: Configured company slug

    Returns:
        NormalizedJob, or None if the job has no URL or is not a target role

    Examples:
        >>> raw = RawJob(
        ...     id="42",
        ...     title="Senior Data Engineer",
        ...     location="Remote - US",
        ...     fields={"absolute_url": "https://x/42"},
        ... )
        >>> normalize_job(raw, "greenhouse", "acme").remote
        True
    """
    url = resolve_url(raw)
    if not url:
        logger.warning(
            "[%s] Job %s missing URL",
            source,
            raw.id,
            extra={"source": source, "company": company, "source_job_id": raw.id},
        )
        return None

    if not is_relevant_title(raw.title):
        logger.debug(
            "Skipping job with non-target title",
            extra={"source": source, "source_job_id": raw.id, "title": raw.title},
        )
        return None

    return NormalizedJob(
        source=source,
        source_job_id=str(raw.id),
        company=company,
        title=raw.title.strip(),
        url=url,
        location=raw.location.strip(),
        remote=is_remote(raw.location),
        posted_at=resolve_posted_at(raw),
    )
