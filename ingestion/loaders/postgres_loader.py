"""
Load decoded zone records into gz_traffic_index in a single transaction
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncConnection, AsyncTransaction
from models.traffic_index import TrafficIndexRecord
from schemas.traffic import TrafficRecord
from core.exceptions import (
    DatabaseConnectionError,
    TransactionError,
    DatabaseError,
    InsertError
)
import logging

logger = logging.getLogger(__name__)

RECORD_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class TrafficIndexLoader:
    """
    Insert one run's batch of zone records as a timestamped snapshot.

    Ensures:
    - One capture timestamp shared by every row of the batch
    - Rows inserted in decoded order through one parameterized statement
    - All-or-nothing: any failure after BEGIN rolls the whole batch back
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.table = TrafficIndexRecord.__table__

    async def load(
        self,
        records: List[TrafficRecord],
        record_time: Optional[datetime] = None
    ) -> int:
        """
        Insert records inside one transaction.

        An empty batch still opens and commits an (empty) transaction.

        Args:
            records: Decoded records, in provider order
            record_time: Capture time; defaults to the local wall clock now

        Returns:
            Number of rows inserted

        Raises:
            DatabaseConnectionError: Could not connect
            TransactionError: BEGIN or COMMIT failed
            DatabaseError: The insert statement could not be prepared
            InsertError: A row failed to insert (batch rolled back)
        """
        record_time = (record_time or datetime.now()).replace(microsecond=0)
        formatted_time = record_time.strftime(RECORD_TIME_FORMAT)
        table_name = self.table.name

        try:
            conn = await self.engine.connect()
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseConnectionError(
                "Failed to connect to database",
                context={"table_name": table_name},
                original_exception=e
            )

        try:
            try:
                trans = await conn.begin()
            except (SQLAlchemyError, OSError) as e:
                raise TransactionError(
                    "Failed to start transaction",
                    context={"operation": "BEGIN", "table_name": table_name},
                    original_exception=e
                )

            try:
                stmt = self._prepare_statement()
            except SQLAlchemyError as e:
                await self._rollback(trans)
                raise DatabaseError(
                    "Failed to prepare insert statement",
                    context={"operation": "PREPARE", "table_name": table_name},
                    original_exception=e
                )

            await self._insert_all(conn, trans, stmt, records, record_time, formatted_time)

            try:
                await trans.commit()
            except (SQLAlchemyError, OSError) as e:
                await self._rollback(trans)
                raise TransactionError(
                    "Failed to commit transaction",
                    context={
                        "operation": "COMMIT",
                        "table_name": table_name,
                        "records_to_load": len(records)
                    },
                    original_exception=e
                )
        finally:
            await conn.close()

        logger.info(f"Data inserted successfully: {len(records)} rows into {table_name} at {formatted_time}")
        return len(records)

    def _prepare_statement(self):
        """INSERT INTO gz_traffic_index (zone_id, ..., record_time) with named binds"""
        return insert(self.table)

    async def _insert_all(
        self,
        conn: AsyncConnection,
        trans: AsyncTransaction,
        stmt,
        records: List[TrafficRecord],
        record_time: datetime,
        formatted_time: str
    ):
        for batch_index, record in enumerate(records):
            logger.info(
                f"zone: {record.zone_id}, index: {record.congestion_index:.2f}, "
                f"name: {record.zone_name}, number: {record.zone_rank}, "
                f"speed: {record.avg_speed:.2f}, time: {formatted_time}"
            )

            try:
                await conn.execute(stmt, record.to_row(record_time))
            except (SQLAlchemyError, OSError) as e:
                await self._rollback(trans)
                raise InsertError(
                    f"Failed to insert record {batch_index + 1} of {len(records)}",
                    context={
                        "table_name": self.table.name,
                        "batch_index": batch_index,
                        "zone_id": record.zone_id
                    },
                    original_exception=e
                )

    @staticmethod
    async def _rollback(trans: AsyncTransaction):
        """Roll back, logging (not raising) a failed rollback so the original error surfaces"""
        try:
            await trans.rollback()
            logger.warning("Transaction rolled back")
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Rollback failed: {str(e)}")
