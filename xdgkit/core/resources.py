"""
Access to the xdg-utils scripts bundled with the package.

The scripts ship as package data under ``xdgkit/scripts/``. A ResourceBundle
can also point at any other directory (or importlib Traversable), which is how
tests and downstream packagers supply their own script sets.
"""

import logging
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from xdgkit.core.exceptions import ResourceNotFoundError
from xdgkit.core.models import SCRIPT_VERSION, ToolScript
from xdgkit.core.verification import DEFAULT_ALGORITHM, compute_stream_hash

logger = logging.getLogger(__name__)

SCRIPTS_PACKAGE = "xdgkit"
SCRIPTS_DIRECTORY = "scripts"


def default_scripts_root() -> Traversable:
    """Get the package data directory holding the bundled scripts."""
    return resources.files(SCRIPTS_PACKAGE) / SCRIPTS_DIRECTORY


class ResourceBundle:
    """
    A versioned set of embedded scripts.

    Attributes:
        root: Directory (Path or Traversable) containing one file per tool
        version: Version string of the script set
        algorithm: Digest algorithm used for staleness checks
    """

    def __init__(
        self,
        root: Optional[Union[Path, Traversable]] = None,
        version: str = SCRIPT_VERSION,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        self.root = root if root is not None else default_scripts_root()
        self.version = version
        self.algorithm = algorithm

    def _entry(self, name: str) -> Traversable:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ResourceNotFoundError(name, str(self.root))

        entry = self.root.joinpath(name)
        if not entry.is_file():
            raise ResourceNotFoundError(name, str(self.root))
        return entry

    def has(self, name: str) -> bool:
        try:
            self._entry(name)
        except ResourceNotFoundError:
            return False
        return True

    def open(self, name: str) -> BinaryIO:
        """
        Open a bundled script for binary reading.

        Args:
            name: Tool name (e.g., 'xdg-open')

        Returns:
            Binary stream; the caller closes it

        Raises:
            ResourceNotFoundError: If the script is not bundled
        """
        entry = self._entry(name)
        try:
            return entry.open("rb")
        except OSError as e:
            raise ResourceNotFoundError(name, str(self.root)) from e

    def digest(self, name: str) -> str:
        """
        Compute the digest of a bundled script's content.

        Raises:
            ResourceNotFoundError: If the script is not bundled
            IntegrityError: If the script cannot be read
        """
        with self.open(name) as stream:
            return compute_stream_hash(stream, self.algorithm)

    def script(self, name: str) -> ToolScript:
        return ToolScript(name=name, version=self.version, digest=self.digest(name))

    def names(self) -> List[str]:
        """List bundled script names, sorted."""
        if not self.root.is_dir():
            logger.warning(f"Bundled scripts directory not found: {self.root}")
            return []
        return sorted(
            entry.name
            for entry in self.root.iterdir()
            if entry.is_file()
            and not entry.name.startswith((".", "_"))
            and not entry.name.endswith((".md", ".py", ".pyc"))
        )

    def __repr__(self):
        return f"ResourceBundle(root={str(self.root)!r}, version={self.version!r})"


__all__ = [
    "ResourceBundle",
    "default_scripts_root",
]
