"""
Decode the raw district ranking payload with Pydantic validation
"""

from typing import List
from pydantic import TypeAdapter, ValidationError
from schemas.traffic import TrafficRecord
from core.exceptions import DataFormatError, SchemaValidationError
import logging

logger = logging.getLogger(__name__)

_batch_adapter = TypeAdapter(List[TrafficRecord])

# NaN/Infinity literals parse but are not JSON
_FORMAT_ERROR_TYPES = {"json_invalid", "finite_number"}


class TrafficIndexDecoder:
    """
    Decode a JSON array of zone objects into TrafficRecord models.

    Handles:
    - Field mapping (id, index, name, number, speed)
    - Strict type checking
    - All-or-nothing decoding: one bad member fails the batch
    """

    def decode(self, payload: bytes) -> List[TrafficRecord]:
        """
        Decode payload, preserving the provider's array order.

        Returns:
            List of TrafficRecord; empty when the provider sent []

        Raises:
            DataFormatError: Payload is not well-formed JSON
            SchemaValidationError: Payload is not an array of valid zone objects
        """
        try:
            records = _batch_adapter.validate_json(payload)
        except ValidationError as e:
            errors = e.errors()

            if any(err["type"] in _FORMAT_ERROR_TYPES for err in errors):
                raise DataFormatError(
                    "Failed to parse JSON response",
                    context={
                        "size_bytes": len(payload),
                        "payload_head": payload[:200].decode("utf-8", errors="replace")
                    },
                    original_exception=e
                )

            field_errors = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in errors
            ]
            raise SchemaValidationError(
                f"Payload does not match the traffic record schema ({len(errors)} errors)",
                context={"field_errors": field_errors},
                original_exception=e
            )

        logger.info(f"Decoded {len(records)} zone records")
        return records
