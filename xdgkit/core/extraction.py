"""
Extraction of bundled scripts to executable files on disk.

Extracted files are written atomically: content goes to a temporary sibling
first, which is made executable and then renamed over the target. A failed
copy never leaves a truncated script at the target path.

Usage:
    from xdgkit.core.extraction import Extractor

    extractor = Extractor()
    written = extractor.ensure(bundle, "xdg-open", target)
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional, Union

from xdgkit.core.exceptions import ExtractionError, IntegrityError
from xdgkit.core.locking import DEFAULT_LOCK_TIMEOUT, ExtractionLock
from xdgkit.core.models import BUFFER_SIZE
from xdgkit.core.resources import ResourceBundle
from xdgkit.core.verification import DEFAULT_ALGORITHM, verify_file_hash

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def write_stream(stream: BinaryIO, target: Union[str, Path]) -> Path:
    """
    Atomically replace a file with the full content of a binary stream.

    Args:
        stream: Readable binary stream (not closed)
        target: Destination file

    Returns:
        The target path

    Raises:
        ExtractionError: If reading, writing or renaming fails
    """
    target = Path(target)

    try:
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ExtractionError(target, f"cannot create temporary file: {e}") from e

    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "wb") as output:
            while chunk := stream.read(BUFFER_SIZE):
                output.write(chunk)
        os.chmod(temp_path, EXECUTABLE_MODE)
        temp_path.replace(target)
    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning(f"Failed to remove temporary file {temp_path}")
        raise ExtractionError(target, str(e)) from e

    return target


class Extractor:
    """
    Writes bundled scripts to target files, one writer at a time.

    Attributes:
        lock_timeout: Seconds to wait for another process's extraction
        algorithm: Digest algorithm used for currency checks
    """

    def __init__(
        self,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        self.lock_timeout = lock_timeout
        self.algorithm = algorithm

    def extract(self, stream: BinaryIO, target: Union[str, Path]) -> Path:
        """
        Copy a resource stream to a target file under the extraction lock.

        Any existing content at the target is replaced.

        Args:
            stream: Resource stream
            target: Destination file

        Returns:
            The target path

        Raises:
            ExtractionError: If the copy fails or the lock times out
        """
        target = Path(target)
        with ExtractionLock(target, timeout=self.lock_timeout):
            logger.info(f"Extracting script to {target}")
            return write_stream(stream, target)

    def is_current(self, target: Union[str, Path], expected_digest: str) -> bool:
        """
        Check whether a target file exists and matches a digest.

        Raises:
            IntegrityError: If the target exists but cannot be read
        """
        target = Path(target)
        if not target.is_file():
            return False
        return verify_file_hash(target, expected_digest, self.algorithm)

    def ensure(
        self,
        bundle: ResourceBundle,
        name: str,
        target: Union[str, Path],
        expected_digest: Optional[str] = None,
    ) -> bool:
        """
        Make a target file hold the current content of a bundled script.

        The currency check is repeated after the lock is acquired, so when
        several callers race on a cold cache only the first one writes.

        Args:
            bundle: Bundle holding the script
            name: Tool name
            target: Destination file
            expected_digest: Digest of the bundled script, if already known

        Returns:
            True if the file was written, False if it was already current

        Raises:
            ResourceNotFoundError: If the script is not bundled
            ExtractionError: If the copy fails
        """
        target = Path(target)
        expected = expected_digest or bundle.digest(name)

        with ExtractionLock(target, timeout=self.lock_timeout):
            try:
                if self.is_current(target, expected):
                    logger.debug(f"Script already current: {target}")
                    return False
            except IntegrityError as e:
                logger.warning(f"Existing script unreadable, replacing: {e}")

            if target.exists():
                logger.info(f"Refreshing stale script {name} at {target}")
            else:
                logger.info(f"Extracting script {name} to {target}")

            with bundle.open(name) as stream:
                write_stream(stream, target)

        return True


__all__ = [
    "EXECUTABLE_MODE",
    "Extractor",
    "write_stream",
]
