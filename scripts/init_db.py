"""
Create the jobs table.

Safe to run repeatedly: every statement uses IF NOT EXISTS.

Usage:
    python scripts/init_db.py
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Import after path modification
from ats_ingest.ingestor.db_operations import DatabaseError, JobsDB  # noqa: E402

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def main() -> int:
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        logger.error("DATABASE_URL environment variable must be set")
        return 2

    try:
        with JobsDB(database_url, max_connections=1) as db:
            db.create_schema()
    except DatabaseError as e:
        logger.error(f"Failed to initialize database: {e}")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
