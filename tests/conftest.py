"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import os
from datetime import datetime, timezone

import pytest

from ats_ingest.source_extractor.base import RawJob


@pytest.fixture(scope="session")
def database_url() -> str | None:
    """
    Provide a database URL for integration tests.

    Only TEST_DATABASE_URL is honoured so that integration tests never run
    against a development database by accident.

    Scope: session (created once per test run)
    """
    return os.getenv("TEST_DATABASE_URL")


@pytest.fixture(scope="function")
def fixed_now() -> datetime:
    """Reference time used by recency and end-to-end tests."""
    return datetime(2024, 1, 5, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def sample_raw_job() -> RawJob:
    """
    Provide a Greenhouse-shaped raw job.

    Scope: function (created fresh for each test)
    """
    return RawJob(
        id="42",
        title="Senior Data Engineer",
        location="Remote - US",
        fields={
            "absolute_url": "https://x/42",
            "updated_at": "2024-01-01T00:00:00Z",
        },
    )


@pytest.fixture(scope="function")
def greenhouse_payload() -> dict:
    """Sample Greenhouse board API response."""
    return {
        "jobs": [
            {
                "id": 4012345,
                "title": "Analytics Engineer",
                "location": {"name": "New York, NY"},
                "absolute_url": "https://boards.greenhouse.io/acme/jobs/4012345",
                "updated_at": "2024-01-03T12:00:00-05:00",
                "created_at": "2023-12-20T09:00:00-05:00",
            },
            {
                "id": 4012346,
                "title": "Office Manager",
                "location": None,
                "absolute_url": None,
                "updated_at": None,
            },
        ],
        "meta": {"total": 2},
    }


@pytest.fixture(scope="function")
def lever_payload() -> list:
    """Sample Lever postings API response."""
    return [
        {
            "id": "5f1c-aa",
            "text": "Data Scientist",
            "categories": {"location": "Remote", "team": "Data"},
            "hostedUrl": "https://jobs.lever.co/acme/5f1c-aa",
            "applyUrl": "https://jobs.lever.co/acme/5f1c-aa/apply",
            "createdAt": 1704067200000,
            "updatedAt": 1704153600000,
        },
    ]


@pytest.fixture(scope="function")
def ashby_payload() -> dict:
    """Sample Ashby GraphQL response."""
    return {
        "data": {
            "organizationHostedJobsPage": {
                "jobs": [
                    {
                        "id": "b7e1",
                        "title": "BI Analyst",
                        "location": "Berlin",
                        "applicationUrl": "https://jobs.ashbyhq.com/acme/b7e1",
                        "publishedAt": "2024-01-02T08:00:00.000Z",
                        "updatedAt": "2024-01-04T08:00:00.000Z",
                        "createdAt": "2023-12-01T08:00:00.000Z",
                    }
                ]
            }
        }
    }


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
