"""
Greenhouse Job Board API Adapter.

Public board endpoint: GET https://boards-api.greenhouse.io/v1/boards/{slug}/jobs
The response is an object with a `jobs` array. Each job carries a nested
`location` object, an `absolute_url` and ISO 8601 `updated_at`/`created_at`.
"""

import logging
from typing import Any

import requests

from ..base import RawJob, SourceAdapter, as_str

logger = logging.getLogger(__name__)

GREENHOUSE_BASE_URL = "https://boards-api.greenhouse.io/v1/boards"


class GreenhouseAdapter(SourceAdapter):
    """Adapter for the Greenhouse job board API."""

    def __init__(self, base_url: str = GREENHOUSE_BASE_URL, **kwargs: Any):
        super().__init__(source_name="greenhouse", **kwargs)
        self.base_url = base_url

    def _request(self, company_slug: str) -> requests.Response:
        url = f"{self.base_url}/{company_slug}/jobs"
        logger.debug(
            "Making Greenhouse API call",
            extra={"url": url, "company": company_slug},
        )
        return requests.get(
            url,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )

    def _extract_jobs(self, payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise ValueError(f"expected object, got {type(payload).__name__}")
        jobs = payload.get("jobs") or []
        if not isinstance(jobs, list):
            raise ValueError("`jobs` is not a list")
        return jobs

    def map_to_raw(self, item: dict[str, Any]) -> RawJob:
        location = item.get("location")
        location_name = location.get("name") if isinstance(location, dict) else None

        return RawJob(
            id=as_str(item.get("id")),
            title=as_str(item.get("title")),
            location=as_str(location_name),
            fields={
                "absolute_url": as_str(item.get("absolute_url")),
                "updated_at": as_str(item.get("updated_at")),
                "created_at": as_str(item.get("created_at")),
            },
        )
