"""ATS Adapters.

This package contains concrete implementations of the SourceAdapter interface
for the supported applicant-tracking systems.

Available adapters:
- GreenhouseAdapter: Greenhouse job board API (greenhouse_adapter.py)
- LeverAdapter: Lever postings API (lever_adapter.py)
- AshbyAdapter: Ashby hosted jobs page GraphQL API (ashby_adapter.py)
- MockAdapter: For testing purposes (mock_adapter.py)
"""

from ..base import SourceAdapter
from .ashby_adapter import AshbyAdapter
from .greenhouse_adapter import GreenhouseAdapter
from .lever_adapter import LeverAdapter
from .mock_adapter import MockAdapter

# Supported sources, in the order their companies are dispatched
ADAPTERS: dict[str, type[SourceAdapter]] = {
    "greenhouse": GreenhouseAdapter,
    "lever": LeverAdapter,
    "ashby": AshbyAdapter,
}


class UnknownSourceError(KeyError):
    """Raised when no adapter is registered for a source name."""


def get_adapter(source: str) -> SourceAdapter:
    """
    Build the adapter registered for a source.

    Args:
        source: Source name (e.g. "lever")

    Returns:
        A new adapter instance

    Raises:
        UnknownSourceError: If the source is not supported
    """
    try:
        adapter_cls = ADAPTERS[source]
    except KeyError:
        raise UnknownSourceError(f"No adapter registered for source '{source}'") from None
    return adapter_cls()


def build_adapters() -> dict[str, SourceAdapter]:
    """Instantiate one adapter per supported source."""
    return {source: get_adapter(source) for source in ADAPTERS}


__all__ = [
    "ADAPTERS",
    "AshbyAdapter",
    "GreenhouseAdapter",
    "LeverAdapter",
    "MockAdapter",
    "UnknownSourceError",
    "build_adapters",
    "get_adapter",
]
