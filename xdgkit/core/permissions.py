"""
Write/execute validation for candidate script locations.

A candidate path is usable when the file there is, or can be made, writable
and executable by the current user. When the file does not exist yet, the
only reliable test is to create a probe file in its parent directory and try
the same checks on it: temp directories and home directories often carry
mount options (noexec) or ACLs that metadata alone does not reveal.

Usage:
    from xdgkit.core.permissions import PermissionValidator

    validator = PermissionValidator()
    if validator.is_usable(Path("/tmp/xdgkit/alice/1.1.3/xdg-open")):
        ...
"""

import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)

PROBE_PREFIX = ".xdgkit-probe-"


def _add_mode_bits(path: Path, bits: int) -> None:
    current = stat.S_IMODE(path.stat().st_mode)
    os.chmod(path, current | bits)


def ensure_writable(path: Union[str, Path]) -> bool:
    """
    Check that a file is writable, granting owner write if it is not.

    Args:
        path: Existing file path

    Returns:
        True if the file is writable after the upgrade attempt
    """
    path = Path(path)
    if os.access(path, os.W_OK):
        return True

    try:
        _add_mode_bits(path, stat.S_IWUSR)
    except OSError as e:
        logger.debug(f"Could not grant write permission on {path}: {e}")
        return False

    return os.access(path, os.W_OK)


def ensure_executable(path: Union[str, Path]) -> bool:
    """
    Check that a file is executable, granting owner execute if it is not.

    Args:
        path: Existing file path

    Returns:
        True if the file is executable after the upgrade attempt
    """
    path = Path(path)
    if os.access(path, os.X_OK):
        return True

    try:
        _add_mode_bits(path, stat.S_IXUSR)
    except OSError as e:
        logger.debug(f"Could not grant execute permission on {path}: {e}")
        return False

    return os.access(path, os.X_OK)


@contextmanager
def probe_file(directory: Path) -> Iterator[Path]:
    """
    Create a uniquely named disposable file in a directory.

    The file is removed when the context exits, whether or not the body
    raised.

    Args:
        directory: Directory to probe

    Yields:
        Path to the probe file

    Raises:
        OSError: If the probe file cannot be created
    """
    fd, probe_path_str = tempfile.mkstemp(dir=directory, prefix=PROBE_PREFIX)
    probe_path = Path(probe_path_str)
    os.close(fd)

    try:
        yield probe_path
    finally:
        try:
            probe_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove probe file {probe_path}: {e}")


class PermissionValidator:
    """
    Decides whether a candidate script path can hold an executable.

    The validator may create directories (parents of the candidate path) and
    may add owner write/execute bits to an existing file. It never leaves a
    probe file behind.
    """

    def is_usable(self, path: Union[str, Path]) -> bool:
        """
        Check whether a path is, or can become, a writable executable file.

        Args:
            path: Candidate file path

        Returns:
            True if the path is usable

        Example:
            >>> validator = PermissionValidator()
            >>> validator.is_usable(Path.home() / ".xdgkit" / "1.1.3" / "xdg-open")
            True
        """
        path = Path(path)

        if path.exists():
            if path.is_dir():
                logger.debug(f"Candidate is a directory, not a file: {path}")
                return False
            return self._check_file(path)

        return self._check_parent(path.parent)

    def _check_file(self, path: Path) -> bool:
        usable = ensure_writable(path) and ensure_executable(path)
        if not usable:
            logger.debug(f"Candidate is not writable/executable: {path}")
        return usable

    def _check_parent(self, parent: Path) -> bool:
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug(f"Cannot create directory {parent}: {e}")
            return False

        if not parent.is_dir():
            logger.debug(f"Parent is not a directory: {parent}")
            return False

        try:
            with probe_file(parent) as probe:
                return self._check_file(probe)
        except OSError as e:
            logger.debug(f"Cannot create probe file in {parent}: {e}")
            return False


__all__ = [
    "PROBE_PREFIX",
    "PermissionValidator",
    "ensure_writable",
    "ensure_executable",
    "probe_file",
]
