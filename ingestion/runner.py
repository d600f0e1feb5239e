# ============================================================================
# File: ingestion/runner.py
# Description: ETL orchestrator for the district congestion snapshot
# ============================================================================
"""
ETL Runner - Orchestrates Fetch, Snapshot, Decode, Load.

The phases run strictly one after another and every failure is terminal:
- Nothing is persisted when the fetch fails
- The snapshot is written before decoding, so a bad payload can be inspected
- Nothing touches the database until the whole payload decoded cleanly
- The load is one transaction; a failed row rolls back the batch
"""

from datetime import datetime
from typing import Dict, Any, Optional
import httpx
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine
import logging

from core.config import Settings
from core.database import create_engine
from core.exceptions import ETLException, ConfigurationError
from ingestion.extractors.api_extractor import TrafficIndexExtractor
from ingestion.snapshot import SnapshotWriter
from ingestion.transformers.decoder import TrafficIndexDecoder
from ingestion.loaders.postgres_loader import TrafficIndexLoader
from ingestion.run_lock import RunLock

logger = logging.getLogger(__name__)


class ETLRunner:
    """
    Traffic index ETL orchestrator.

    Responsibilities:
    - Orchestrate Fetch → Snapshot → Decode → Load
    - Serialize runs through the run lock
    - Own the engine lifecycle when no engine is injected
    - Report run statistics
    """

    def __init__(
        self,
        settings: Settings,
        engine: Optional[AsyncEngine] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        self.engine = engine
        self.transport = transport

    async def run(self) -> Dict[str, Any]:
        """
        Run the full pipeline once.

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - records_extracted: Number of records decoded
            - records_loaded: Number of rows inserted
            - record_time: Capture timestamp shared by the batch
            - snapshot_path: Where the raw payload was written

        Raises:
            ConfigurationError: Missing or invalid database settings
            RunLockError: Another run holds the lock
            ExtractionError: Fetch failed
            SnapshotWriteError: Snapshot could not be written
            TransformationError: Payload could not be decoded
            LoadError: Load failed (batch rolled back)
            ETLException: Any other error, wrapped
        """
        records_extracted = 0
        records_loaded = 0
        engine = self.engine
        owns_engine = engine is None

        try:
            if owns_engine:
                engine = self._create_engine()

            with RunLock(self.settings.RUN_LOCK_PATH):
                # --------------------------------------------------
                # PHASE 1: FETCH
                # --------------------------------------------------
                extractor = TrafficIndexExtractor(self.settings.endpoint, transport=self.transport)
                payload = await extractor.fetch()

                # --------------------------------------------------
                # PHASE 2: RAW SNAPSHOT
                # --------------------------------------------------
                snapshot_path = SnapshotWriter(self.settings.SNAPSHOT_PATH).write(payload)

                # --------------------------------------------------
                # PHASE 3: DECODE
                # --------------------------------------------------
                # Decode the in-memory payload, not the snapshot file
                records = TrafficIndexDecoder().decode(payload)
                records_extracted = len(records)

                # --------------------------------------------------
                # PHASE 4: LOAD
                # --------------------------------------------------
                record_time = datetime.now().replace(microsecond=0)
                loader = TrafficIndexLoader(engine)
                records_loaded = await loader.load(records, record_time=record_time)

            result = {
                "status": "success",
                "records_extracted": records_extracted,
                "records_loaded": records_loaded,
                "record_time": record_time.isoformat(sep=" "),
                "snapshot_path": str(snapshot_path)
            }

            logger.info(
                f"ETL run completed: {result['status']} - "
                f"Extracted: {records_extracted}, Loaded: {records_loaded}"
            )

            return result

        except ETLException as e:
            logger.error(
                f"ETL pipeline failed: {e}",
                extra={"error_context": e.to_dict()}
            )
            raise

        except Exception as e:
            logger.exception("Unexpected error in ETL pipeline")
            raise ETLException(
                "Unexpected error in ETL pipeline",
                context={
                    "records_extracted": records_extracted,
                    "records_loaded": records_loaded
                },
                original_exception=e
            )

        finally:
            if owns_engine and engine is not None:
                await engine.dispose()

    def _create_engine(self) -> AsyncEngine:
        database_url = self.settings.database_url
        if not database_url:
            raise ConfigurationError(
                "DB_CONNECTION_STRING is not set",
                context={"setting": "DB_CONNECTION_STRING"}
            )

        try:
            return create_engine(database_url)
        except (ArgumentError, ImportError) as e:
            raise ConfigurationError(
                "Invalid DB_CONNECTION_STRING",
                context={"setting": "DB_CONNECTION_STRING"},
                original_exception=e
            )
