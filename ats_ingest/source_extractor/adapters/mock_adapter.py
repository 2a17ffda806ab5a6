"""Mock Adapter for Testing.

This adapter simulates an ATS job board for testing purposes.
It doesn't make real HTTP requests, but goes through the same
payload -> RawJob mapping as the real adapters.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..base import RawJob, SourceAdapter, as_str


class MockAdapter(SourceAdapter):
    """Mock adapter that returns fake job postings for testing.

    This adapter is useful for:
    - Unit testing the orchestrator without hitting real APIs
    - Simulating slow boards (`delay`) to exercise the worker pool
    - Simulating unexpected failures (`fail_on_attempt`)

    Example:
        adapter = MockAdapter(num_jobs=6)
        jobs = adapter.fetch("acme")
        assert len(jobs) == 6
    """

    def __init__(
        self,
        num_jobs: int = 10,
        fail_on_attempt: int = 0,
        delay: float = 0.0,
        posted_at: Optional[datetime] = None,
    ):
        """Initialize the mock adapter.

        Args:
            num_jobs: Number of fake jobs returned per company
            fail_on_attempt: If > 0, raise on this attempt number
            delay: Seconds to sleep per fetch, simulating network latency
            posted_at: Posting timestamp for every job (defaults to one day ago)
        """
        super().__init__(source_name="mock")
        self.num_jobs = num_jobs
        self.fail_on_attempt = fail_on_attempt
        self.delay = delay
        self.posted_at = posted_at
        self.attempt_count = 0

    def _fetch_payload(self, company_slug: str) -> Any:
        # Not caught by fetch(): surfaces to the caller like an unexpected bug
        self.attempt_count += 1
        if self.fail_on_attempt > 0 and self.attempt_count == self.fail_on_attempt:
            raise ConnectionError("Simulated adapter failure for testing")

        if self.delay:
            time.sleep(self.delay)

        return {
            "postings": [
                self._generate_fake_job(company_slug, i) for i in range(self.num_jobs)
            ]
        }

    def _extract_jobs(self, payload: Any) -> list[Any]:
        return payload["postings"]

    def map_to_raw(self, item: dict[str, Any]) -> RawJob:
        return RawJob(
            id=as_str(item.get("id")),
            title=as_str(item.get("title")),
            location=as_str(item.get("location")),
            fields={
                "absolute_url": as_str(item.get("url")),
                "posted_at": as_str(item.get("posted_at")),
            },
        )

    def _generate_fake_job(self, company_slug: str, index: int) -> dict[str, Any]:
        """Generate a fake job posting.

        Titles cycle through relevant data roles, so every generated job
        passes the relevance check.
        """
        job_titles = [
            "Data Engineer",
            "Analytics Engineer",
            "Data Scientist",
            "Senior Data Analyst",
            "BI Engineer",
        ]
        locations = [
            "Remote",
            "Montreal, QC, Canada",
            "Toronto, ON, Canada",
            "Anywhere in North America",
        ]

        posted_at = self.posted_at or datetime.now(timezone.utc) - timedelta(days=1)

        return {
            "id": f"{company_slug}-{index}",
            "title": job_titles[index % len(job_titles)],
            "location": locations[index % len(locations)],
            "url": f"https://example.com/{company_slug}/jobs/{index}",
            "posted_at": posted_at.isoformat(),
        }
