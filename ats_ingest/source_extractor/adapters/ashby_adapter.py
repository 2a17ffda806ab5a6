"""
Ashby Hosted Jobs Page Adapter.

Ashby is queried through GraphQL: a POST to the public postings endpoint that
names the company's hosted jobs page. Jobs are nested under
`data.organizationHostedJobsPage.jobs`. Location is a flat string and
`applicationUrl` is the only link. `publishedAt` is a dedicated posting
timestamp, distinct from `updatedAt`/`createdAt`.
"""

import logging
from typing import Any

import requests

from ..base import RawJob, SourceAdapter, as_str

logger = logging.getLogger(__name__)

ASHBY_GRAPHQL_URL = "https://api.ashbyhq.com/postings/public"

HOSTED_JOBS_QUERY = """
query($organizationHostedJobsPageName: String!) {
  organizationHostedJobsPage(name: $organizationHostedJobsPageName) {
    jobs {
      id
      title
      location
      applicationUrl
      updatedAt
      createdAt
      publishedAt
    }
  }
}
"""


class AshbyAdapter(SourceAdapter):
    """Adapter for Ashby hosted job pages."""

    def __init__(self, url: str = ASHBY_GRAPHQL_URL, **kwargs: Any):
        super().__init__(source_name="ashby", **kwargs)
        self.url = url

    def _request(self, company_slug: str) -> requests.Response:
        logger.debug(
            "Making Ashby GraphQL call",
            extra={"url": self.url, "company": company_slug},
        )
        return requests.post(
            self.url,
            json={
                "query": HOSTED_JOBS_QUERY,
                "variables": {"organizationHostedJobsPageName": company_slug},
            },
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

    def _extract_jobs(self, payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise ValueError(f"expected object, got {type(payload).__name__}")
        data = payload.get("data") or {}
        page = data.get("organizationHostedJobsPage") or {}
        jobs = page.get("jobs") or []
        if not isinstance(jobs, list):
            raise ValueError("`jobs` is not a list")
        return jobs

    def map_to_raw(self, item: dict[str, Any]) -> RawJob:
        return RawJob(
            id=as_str(item.get("id")),
            title=as_str(item.get("title")),
            location=as_str(item.get("location")),
            fields={
                # Ashby's single link is treated as the hosted posting URL
                "hostedUrl": as_str(item.get("applicationUrl")),
                "posted_at": as_str(item.get("publishedAt")),
                "updatedAt": as_str(item.get("updatedAt")),
                "createdAt": as_str(item.get("createdAt")),
            },
        )
