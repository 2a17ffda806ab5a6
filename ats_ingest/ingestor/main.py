"""
Ingestor - Main Entry Point

This is the command-line trigger for an ingestion run. It is meant to be
invoked by a scheduler (cron, a CI schedule, an orchestrator task) and prints
the run result as JSON for logging and alerting.

Usage:
    python -m ats_ingest.ingestor.main [OPTIONS]

Options:
    --config TEXT         Path to a sources.yml file
    --token TEXT          Authorization header value ("Bearer <secret>"),
                          defaults to the INGEST_AUTHORIZATION env var
    --no-date-filter      Keep postings older than the recency window (backfill)
    --dry-run             Upsert into an in-memory store instead of PostgreSQL
    --verbose             Enable debug logging
    --help                Show this message and exit

Examples:
    # Regular scheduled run:
    python -m ats_ingest.ingestor.main --token "Bearer $CRON_SECRET"

    # Backfill everything currently posted, regardless of age:
    python -m ats_ingest.ingestor.main --no-date-filter

    # See what would be ingested without touching the database:
    python -m ats_ingest.ingestor.main --dry-run --verbose

Exit Codes:
    0: Success
    1: Partial failure (some units or records failed)
    2: Fatal error (configuration, database connection, etc.)
    3: Unauthorized
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from ..source_extractor.source_config import ConfigurationError, load_ingestion_config
from .db_operations import DatabaseError, InMemoryJobStore, JobsDB
from .orchestrator import MAX_CONCURRENT_UNITS, IngestionRunResult, is_authorized, run_ingestion

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_FATAL = 2
EXIT_UNAUTHORIZED = 3


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for CLI entry points.

    Logs go to stderr; stdout carries only the JSON result.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Ingest job postings from Greenhouse, Lever and Ashby',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to a sources.yml file',
        default=None
    )

    parser.add_argument(
        '--token',
        type=str,
        help='Authorization header value, e.g. "Bearer <secret>"',
        default=None
    )

    parser.add_argument(
        '--no-date-filter',
        action='store_false',
        help='Keep postings older than the recency window',
        dest='apply_date_filter'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Upsert into an in-memory store instead of PostgreSQL',
        dest='dry_run'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def exit_code_for(result: IngestionRunResult) -> int:
    """Map a run result to a process exit code."""
    if not result.success:
        return EXIT_FATAL
    if result.failed:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS


def emit(result: IngestionRunResult) -> None:
    print(json.dumps(result.to_dict(), indent=2))


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the ingestor.

    Returns:
        Exit code (see module docstring)
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_ingestion_config(args.config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        emit(IngestionRunResult(success=False, error=str(e)))
        return EXIT_FATAL

    token = args.token or os.getenv('INGEST_AUTHORIZATION')
    if not is_authorized(token, config.cron_secret):
        emit(IngestionRunResult(success=False, error='Unauthorized'))
        return EXIT_UNAUTHORIZED

    db: Optional[JobsDB] = None
    try:
        if args.dry_run:
            logger.info("DRY RUN: jobs will be upserted into an in-memory store")
            store = InMemoryJobStore()
        else:
            if not config.database_url:
                logger.error("DATABASE_URL environment variable must be set")
                emit(IngestionRunResult(success=False, error='DATABASE_URL is not set'))
                return EXIT_FATAL
            logger.info("Connecting to database")
            db = JobsDB(config.database_url, max_connections=MAX_CONCURRENT_UNITS)
            store = db

        result = run_ingestion(
            config.units(),
            store=store,
            authorized=True,
            apply_date_filter=args.apply_date_filter,
        )

        if args.dry_run:
            logger.info(f"DRY RUN: {store.count_jobs()} distinct jobs would be stored")

    except DatabaseError as e:
        logger.error(f"Database error: {e}")
        emit(IngestionRunResult(success=False, error=str(e)))
        return EXIT_FATAL

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # Standard Unix exit code for SIGINT

    finally:
        if db is not None:
            db.close()

    emit(result)
    return exit_code_for(result)


if __name__ == '__main__':
    sys.exit(main())
