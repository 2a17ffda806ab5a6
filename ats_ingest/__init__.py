"""ATS Job Ingestion Package.

This package contains the stages of the job ingestion pipeline:
- source_extractor: Fetches job postings from Greenhouse, Lever and Ashby
- normalizer: Normalizes raw postings and applies the recency filter
- ingestor: Orchestrates bounded-concurrency runs and upserts into PostgreSQL
"""

__version__ = "0.1.0"
