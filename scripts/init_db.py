import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import load_settings
from core.database import create_engine
from models.base import Base
# Import all models to ensure they are registered
from models.traffic_index import TrafficIndexRecord

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_database():
    settings = load_settings()
    if not settings.database_url:
        logger.error("DB_CONNECTION_STRING is not set")
        sys.exit(2)

    logger.info("Connecting to database...")
    engine = create_engine(settings.database_url)

    async with engine.begin() as conn:
        logger.info(f"Creating table {TrafficIndexRecord.__tablename__}...")
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Tables created successfully.")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(init_database())
