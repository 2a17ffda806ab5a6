"""ATS ingestion test suite.

This package contains unit and integration tests for the ingestion pipeline.

Test Structure:
- unit/: Unit tests for adapters, normalizer, orchestrator and store
- integration/: Tests that need a real PostgreSQL database
"""

__version__ = "0.1.0"
