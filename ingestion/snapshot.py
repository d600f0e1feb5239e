"""
Raw payload snapshot for audit and debugging
"""

import os
from pathlib import Path
from typing import Union
from core.exceptions import SnapshotWriteError
import logging

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """
    Persist the last fetched payload verbatim.

    The file is overwritten on every run; there is no versioning or retention.
    """

    def __init__(self, path: Union[str, Path], mode: int = 0o644):
        self.path = Path(path)
        self.mode = mode

    def write(self, payload: bytes) -> Path:
        """Write payload to the snapshot path, replacing any previous content"""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(payload)
            os.chmod(self.path, self.mode)
        except OSError as e:
            raise SnapshotWriteError(
                f"Failed to write snapshot to {self.path}",
                context={
                    "snapshot_path": str(self.path),
                    "size_bytes": len(payload)
                },
                original_exception=e
            )

        logger.info(f"Saved {len(payload)} byte snapshot to {self.path}")
        return self.path
