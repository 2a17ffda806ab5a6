"""Source Extractor.

This package is responsible for fetching job postings from applicant-tracking
system APIs and flattening them into a common raw shape.

Main components:
- SourceAdapter: Abstract base class for all ATS adapters
- RawJob: Data class for raw job postings
- Adapters: Provider-specific implementations (in adapters/ directory)
- IngestionConfig: Configured (source, company) pairs for a run
"""

from .base import API_TIMEOUT_SECONDS, RawJob, SourceAdapter
from .source_config import (
    ConfigurationError,
    IngestionConfig,
    ProviderConfig,
    load_ingestion_config,
    load_sources_config,
)

__all__ = [
    "API_TIMEOUT_SECONDS",
    "ConfigurationError",
    "IngestionConfig",
    "ProviderConfig",
    "RawJob",
    "SourceAdapter",
    "load_ingestion_config",
    "load_sources_config",
]
__version__ = "0.1.0"
