"""
List stored jobs.

Prints the most recent jobs as JSON, newest posting first; jobs without a
posting date come last, newest ingestion first.

Usage:
    python -m ats_ingest.ingestor.list_jobs [--limit N]

The limit defaults to 25 and is capped at 100.
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from .db_operations import DEFAULT_LIST_LIMIT, DatabaseError, JobsDB
from .main import configure_logging

load_dotenv()

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='List the most recent stored jobs')
    parser.add_argument(
        '--limit',
        type=str,
        default=str(DEFAULT_LIST_LIMIT),
        help='Maximum number of jobs (default 25, max 100)',
    )
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    database_url = os.getenv('DATABASE_URL')
    if not database_url:
        logger.error("DATABASE_URL environment variable must be set")
        return 2

    try:
        with JobsDB(database_url, max_connections=1) as db:
            jobs = db.list_jobs(args.limit)
    except DatabaseError as e:
        logger.error(f"Failed to fetch jobs: {e}")
        print(json.dumps({'error': 'Failed to fetch jobs', 'details': str(e)}))
        return 2

    print(json.dumps(jobs, indent=2, default=str))
    return 0


if __name__ == '__main__':
    sys.exit(main())
