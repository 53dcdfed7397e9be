"""
Mutual exclusion for script extraction.

Extraction is the only shared mutable resource in xdgkit. Writes are
serialized at two levels:

- a single process-wide re-entrant lock, so threads never interleave writes
- a per-target file lock (``filelock``), so separate processes resolving the
  same script do not either

Usage:
    from xdgkit.core.locking import ExtractionLock

    with ExtractionLock(target, timeout=30):
        # read resource, write target
        pass
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout as LockTimeout

from xdgkit.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

_PROCESS_LOCK = threading.RLock()

DEFAULT_LOCK_TIMEOUT = 30


def lock_path_for(target: Path) -> Path:
    """
    Get the lock file path guarding a target file.

    Args:
        target: File that will be written

    Returns:
        Hidden sibling path ending in '.lock'
    """
    target = Path(target)
    return target.with_name(f".{target.name}.lock")


class ExtractionLock:
    """
    Process-wide plus cross-process lock around writing one target file.

    Attributes:
        target: File being protected
        timeout: Seconds to wait for the file lock
    """

    def __init__(self, target: Path, timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.target = Path(target)
        self.timeout = timeout
        self.lock_path = lock_path_for(self.target)

    @contextmanager
    def hold(self) -> Iterator[None]:
        """
        Acquire both locks for the duration of the block.

        Raises:
            ExtractionError: If the file lock can't be acquired within timeout
        """
        with _PROCESS_LOCK:
            file_lock = FileLock(self.lock_path, timeout=self.timeout)
            try:
                file_lock.acquire()
            except LockTimeout as e:
                logger.error(
                    f"Could not acquire extraction lock after {self.timeout}s. "
                    "Another process may be extracting this script."
                )
                raise ExtractionError(
                    self.target,
                    f"could not acquire lock {self.lock_path} after {self.timeout}s",
                ) from e
            except OSError as e:
                raise ExtractionError(
                    self.target, f"could not create lock {self.lock_path}: {e}"
                ) from e

            logger.debug(f"Acquired extraction lock: {self.lock_path}")
            try:
                yield
            finally:
                file_lock.release()
                logger.debug(f"Released extraction lock: {self.lock_path}")

    def __enter__(self):
        self._context = self.hold()
        return self._context.__enter__()

    def __exit__(self, exc_type, exc_value, traceback):
        return self._context.__exit__(exc_type, exc_value, traceback)


__all__ = [
    "DEFAULT_LOCK_TIMEOUT",
    "ExtractionLock",
    "LockTimeout",
    "lock_path_for",
]
