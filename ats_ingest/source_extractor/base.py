"""Source Adapter Base Class.

This module defines the raw job shape shared by every ATS adapter and the
abstract interface those adapters implement. Each provider speaks a different
wire format; the adapters flatten them all into `RawJob` so the normalizer
never has to know which API a posting came from.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)

# Every upstream call gets exactly one attempt with this timeout
API_TIMEOUT_SECONDS = 10

# Candidate fields, keyed by the wire name each provider uses
URL_FIELDS = ("absolute_url", "hostedUrl", "applyUrl")
DATE_FIELDS = ("posted_at", "updated_at", "updatedAt", "created_at", "createdAt")


def as_str(value: Any) -> str:
    """Stringify a scalar from an API payload, mapping null/absent to ""."""
    if value is None:
        return ""
    return str(value)


@dataclass
class RawJob:
    """A job posting as returned by one ATS, flattened to strings.

    `fields` holds the optional URL and timestamp candidates under their
    original wire names (see URL_FIELDS and DATE_FIELDS). Which of them are
    present depends on the provider.
    """

    id: str
    title: str
    location: str
    fields: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        """Return a candidate field value, or "" when the provider has none."""
        return self.fields.get(name, "")


class SourceAdapter(ABC):
    """Abstract base class for ATS job board adapters.

    HTTP subclasses implement the provider-specific request and payload shape
    (adapters that do not talk HTTP override `_fetch_payload` instead):

        class MyBoardAdapter(SourceAdapter):
            def __init__(self):
                super().__init__(source_name="my_board")

            def _request(self, company_slug):
                ...  # returns requests.Response

            def _extract_jobs(self, payload):
                ...  # returns the list of job objects

            def map_to_raw(self, item):
                ...  # returns RawJob

    `fetch()` ties these together and guarantees that callers never see an
    exception caused by the network or by a malformed payload.
    """

    def __init__(self, source_name: str, timeout: float = API_TIMEOUT_SECONDS):
        """
        Initialize the adapter.

        Args:
            source_name: Unique identifier for this source (e.g. "greenhouse")
            timeout: Request timeout in seconds
        """
        self.source_name = source_name
        self.timeout = timeout

    def _request(self, company_slug: str) -> requests.Response:
        """Issue the HTTP request for one company's job board."""
        raise NotImplementedError

    def _fetch_payload(self, company_slug: str) -> Any:
        """Request one company's board and decode the JSON body."""
        response = self._request(company_slug)
        response.raise_for_status()
        return response.json()

    @abstractmethod
    def _extract_jobs(self, payload: Any) -> List[Any]:
        """
        Locate the list of job objects inside a decoded response.

        Raises:
            ValueError: If the payload does not have the expected shape
        """

    @abstractmethod
    def map_to_raw(self, item: Dict[str, Any]) -> RawJob:
        """Map one provider job object to a RawJob."""

    def fetch(self, company_slug: str) -> List[RawJob]:
        """
        Fetch all postings for one company.

        A single attempt is made. Network errors, timeouts, non-2xx responses
        and malformed payloads are logged and result in an empty list.

        Args:
            company_slug: The company's board identifier on this ATS

        Returns:
            List of RawJob objects (possibly empty)
        """
        try:
            payload = self._fetch_payload(company_slug)
            items = self._extract_jobs(payload)
            jobs = []
            for item in items:
                if not isinstance(item, dict):
                    raise ValueError(f"expected job object, got {type(item).__name__}")
                jobs.append(self.map_to_raw(item))
        except requests.exceptions.RequestException as e:
            logger.error(
                "Failed to fetch jobs from %s for %s: %s",
                self.source_name,
                company_slug,
                e,
                extra={
                    "source": self.source_name,
                    "company": company_slug,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return []
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(
                "Malformed payload from %s for %s: %s",
                self.source_name,
                company_slug,
                e,
                extra={
                    "source": self.source_name,
                    "company": company_slug,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return []

        logger.info(
            "Fetched jobs from %s",
            self.source_name,
            extra={
                "source": self.source_name,
                "company": company_slug,
                "jobs_returned": len(jobs),
            },
        )
        return jobs

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return f"{self.__class__.__name__}(source='{self.source_name}')"
