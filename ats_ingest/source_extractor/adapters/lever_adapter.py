"""
Lever Postings API Adapter.

Public endpoint: GET https://api.lever.co/v0/postings/{slug}?mode=json
The response is a bare JSON array. The title lives in `text`, the location in
`categories.location`, and there are two URLs (`hostedUrl`, `applyUrl`).
Timestamps (`updatedAt`, `createdAt`) are epoch milliseconds.
"""

import logging
from typing import Any

import requests

from ..base import RawJob, SourceAdapter, as_str

logger = logging.getLogger(__name__)

LEVER_BASE_URL = "https://api.lever.co/v0/postings"


class LeverAdapter(SourceAdapter):
    """Adapter for the Lever postings API."""

    def __init__(self, base_url: str = LEVER_BASE_URL, **kwargs: Any):
        super().__init__(source_name="lever", **kwargs)
        self.base_url = base_url

    def _request(self, company_slug: str) -> requests.Response:
        url = f"{self.base_url}/{company_slug}"
        logger.debug(
            "Making Lever API call",
            extra={"url": url, "company": company_slug},
        )
        return requests.get(url, params={"mode": "json"}, timeout=self.timeout)

    def _extract_jobs(self, payload: Any) -> list[Any]:
        if not isinstance(payload, list):
            raise ValueError(f"expected array, got {type(payload).__name__}")
        return payload

    def map_to_raw(self, item: dict[str, Any]) -> RawJob:
        categories = item.get("categories")
        location = categories.get("location") if isinstance(categories, dict) else None

        return RawJob(
            id=as_str(item.get("id")),
            title=as_str(item.get("text")),
            location=as_str(location),
            fields={
                "hostedUrl": as_str(item.get("hostedUrl")),
                "applyUrl": as_str(item.get("applyUrl")),
                "updatedAt": as_str(item.get("updatedAt")),
                "createdAt": as_str(item.get("createdAt")),
            },
        )
