"""
Single-flight guard so overlapping runs cannot race on the snapshot or table
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
from core.exceptions import RunLockError
import logging

logger = logging.getLogger(__name__)


class RunLock:
    """
    Exclusive lock file held for the duration of one ETL run.

    The file is created with O_EXCL, so only one process can hold it. A lock
    left behind by a killed process must be removed by the operator; its
    content names the pid and start time of the holder.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._held = False

    def acquire(self):
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise RunLockError(
                "Another ETL run is in progress",
                context={"lock_path": str(self.path), "holder": self._read_holder()},
                original_exception=e
            )
        except OSError as e:
            raise RunLockError(
                "Failed to create run lock",
                context={"lock_path": str(self.path)},
                original_exception=e
            )

        with os.fdopen(fd, "w") as lock_file:
            lock_file.write(f"pid={os.getpid()} started={datetime.now().isoformat(timespec='seconds')}\n")

        self._held = True
        logger.debug(f"Acquired run lock {self.path}")

    def release(self):
        if not self._held:
            return
        self.path.unlink(missing_ok=True)
        self._held = False
        logger.debug(f"Released run lock {self.path}")

    def _read_holder(self) -> Optional[str]:
        try:
            return self.path.read_text().strip()
        except OSError:
            return None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
