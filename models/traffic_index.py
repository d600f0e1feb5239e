from sqlalchemy import Column, Integer, String, Float, DateTime, Index
from models.base import Base


class TrafficIndexRecord(Base):
    """
    One zone's congestion figures captured by one ETL run.

    Purpose:
    - Time series of district congestion for Guangzhou
    - Every row written by the same run shares record_time, so a run's
      snapshot can be selected with a single equality predicate

    Field Mapping (provider JSON -> column):
    - id -> zone_id
    - name -> zone_name
    - number -> zone_number
    - index -> traffic_index
    - speed -> avg_speed
    """
    __tablename__ = "gz_traffic_index"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Zone identification
    zone_id = Column(String(64), nullable=False)
    zone_name = Column(String(100), nullable=False)
    zone_number = Column(Integer, nullable=False)

    # Metrics
    traffic_index = Column(Float, nullable=False)
    avg_speed = Column(Float, nullable=False)

    # Capture time (local wall clock, second resolution)
    record_time = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_gz_traffic_record_time", "record_time"),
        Index("idx_gz_traffic_zone_time", "zone_id", "record_time"),
    )
