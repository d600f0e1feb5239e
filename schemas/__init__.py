"""
Pydantic schemas for payload validation.

Modules:
    traffic: TrafficRecord, one decoded zone entry of the provider payload

Usage:
    from schemas.traffic import TrafficRecord

    record = TrafficRecord.model_validate(
        {"id": "A1", "index": 5.5, "name": "Zone A", "number": 1, "speed": 32.1}
    )
"""

from schemas.traffic import TrafficRecord

__all__ = [
    "TrafficRecord",
]
