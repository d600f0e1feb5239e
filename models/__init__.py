"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class
    traffic_index: Per-zone congestion snapshot rows (gz_traffic_index)

Database Schema:
    The ETL only ever inserts into gz_traffic_index. The ORM model is used to
    build the parameterized INSERT and by scripts/init_db.py to create the
    table on a fresh database.

Usage:
    from models.base import Base
    from models.traffic_index import TrafficIndexRecord
"""

__all__ = [
    "Base",
    "TrafficIndexRecord",
]
