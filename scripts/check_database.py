"""
Diagnostic check for the ingestion environment.

Reports, as JSON:
- whether DATABASE_URL is set (with a masked prefix)
- database connectivity, jobs table existence and row count
- which company lists and the trigger secret are configured

Usage:
    python scripts/check_database.py

Exit Codes:
    0: Database reachable
    1: Database unreachable or not configured
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from dotenv import load_dotenv

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Import after path modification
from ats_ingest.ingestor.db_operations import DatabaseError, JobsDB  # noqa: E402
from ats_ingest.source_extractor.source_config import COMPANY_ENV_VARS  # noqa: E402

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)


def collect_diagnostics() -> dict[str, Any]:
    database_url = os.getenv("DATABASE_URL")
    diagnostics: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "has_database_url": bool(database_url),
        "database_url_prefix": f"{database_url[:30]}..." if database_url else "NOT SET",
    }

    if database_url:
        try:
            with JobsDB(database_url, max_connections=1) as db:
                diagnostics.update(db.diagnose())
        except DatabaseError as e:
            diagnostics["database_connection"] = "FAILED"
            diagnostics["connection_error"] = str(e)
    else:
        diagnostics["database_connection"] = "NOT CONFIGURED"

    for source, env_var in COMPANY_ENV_VARS.items():
        diagnostics[f"has_companies_{source}"] = bool(os.getenv(env_var))
    diagnostics["has_cron_secret"] = bool(os.getenv("CRON_SECRET"))

    return diagnostics


def main() -> int:
    diagnostics = collect_diagnostics()
    print(json.dumps(diagnostics, indent=2, default=str))
    return 0 if diagnostics["database_connection"] == "CONNECTED" else 1


if __name__ == "__main__":
    sys.exit(main())
