"""
Logging configuration
"""

import logging
import sys
from typing import Optional


def setup_logging(level: Optional[str] = None):
    """Configure application logging"""

    level_name = (level or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # basicConfig is a no-op once handlers exist; the level still applies
    logging.getLogger().setLevel(log_level)

    # Keep driver and HTTP client chatter out of the run log
    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {level_name} level")


def mask_url(url: str) -> str:
    """Mask the password in a database URL for safe logging."""
    if "@" not in url:
        return url
    before_at, after_at = url.split("@", 1)
    scheme, _, credentials = before_at.partition("//")
    if ":" in credentials:
        user = credentials.split(":", 1)[0]
        return f"{scheme}//{user}:****@{after_at}"
    return url
