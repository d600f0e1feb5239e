"""
Script to run the traffic index ETL once.

Exit codes:
    0  success
    1  unexpected error
    2  configuration error
    3  transport error (fetch)
    4  snapshot I/O error
    5  decode error
    6  persistence error (batch rolled back)
    7  another run holds the run lock
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import load_settings
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.runner import ETLRunner

logger = logging.getLogger(__name__)


async def run_etl() -> int:
    """Run the ETL and return the process exit code"""
    # Default handler first so settings warnings reach the run log
    setup_logging()

    try:
        settings = load_settings()
        setup_logging(settings.LOG_LEVEL)
        result = await ETLRunner(settings).run()
    except ETLException as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    logger.info(
        f"Loaded {result['records_loaded']} records at {result['record_time']} "
        f"(snapshot: {result['snapshot_path']})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run_etl()))
