"""
Pydantic schemas for the district congestion payload
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr


class TrafficRecord(BaseModel):
    """
    One zone entry of the district ranking response.

    The provider's short keys are mapped onto descriptive attribute names
    through aliases. Validation is strict: "5.5" is not a congestion index and
    3.0 is not a rank. NaN and Infinity literals are rejected. Integer JSON
    numbers are still accepted for the float fields.
    """

    zone_id: StrictStr = Field(..., alias="id")
    congestion_index: StrictFloat = Field(..., alias="index")
    zone_name: StrictStr = Field(..., alias="name")
    zone_rank: StrictInt = Field(..., alias="number")
    avg_speed: StrictFloat = Field(..., alias="speed")

    class Config:
        frozen = True
        populate_by_name = True
        allow_inf_nan = False
        extra = "ignore"

    def to_row(self, record_time: datetime) -> Dict[str, Any]:
        """Bind parameters for one gz_traffic_index insert, keyed by column name"""
        return {
            "zone_id": self.zone_id,
            "zone_name": self.zone_name,
            "zone_number": self.zone_rank,
            "traffic_index": self.congestion_index,
            "avg_speed": self.avg_speed,
            "record_time": record_time,
        }
