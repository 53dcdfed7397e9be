"""
Resolution of logical tool names to executable paths.

Given a tool name such as ``xdg-open``, the locator returns a path that can
be executed right away. The steps are:

1. If a script directory override is configured, use ``{script_dir}/{tool}``
   as-is once it validates. No extraction, no digest check.
2. Otherwise walk the cache tiers (temp, home, working directory) and pick the
   first one whose location validates.
3. At that location, extract the bundled script if it is missing, or rewrite
   it if its digest differs from the embedded one.
4. If no location validates, fall back to a pre-installed copy on the
   configured search path.
5. If that fails too, raise ToolUnavailableError.

Usage:
    from xdgkit.config import load_config
    from xdgkit.core.locator import ResourceLocator

    locator = ResourceLocator(load_config())
    path = locator.resolve("xdg-open")
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from xdgkit.config.parser import XdgKitConfig
from xdgkit.core.directory import (
    cache_locations,
    find_preinstalled,
    override_location,
    search_path_locations,
)
from xdgkit.core.exceptions import IntegrityError, ToolUnavailableError
from xdgkit.core.extraction import Extractor
from xdgkit.core.permissions import PermissionValidator
from xdgkit.core.resources import ResourceBundle

logger = logging.getLogger(__name__)


class ResourceLocator:
    """
    Resolves tool names to usable executables, extracting them when needed.

    Attributes:
        config: Resolution configuration
        bundle: Embedded scripts
        validator: Write/execute checker for candidate paths
        extractor: Writes scripts to disk
    """

    def __init__(
        self,
        config: Optional[XdgKitConfig] = None,
        bundle: Optional[ResourceBundle] = None,
        validator: Optional[PermissionValidator] = None,
        extractor: Optional[Extractor] = None,
    ):
        self.config = config if config is not None else XdgKitConfig()
        self.bundle = (
            bundle
            if bundle is not None
            else ResourceBundle(version=self.config.script_version)
        )
        self.validator = validator if validator is not None else PermissionValidator()
        self.extractor = (
            extractor
            if extractor is not None
            else Extractor(lock_timeout=self.config.lock_timeout)
        )

    def resolve(self, tool: str) -> Path:
        """
        Get an executable path for a tool.

        Args:
            tool: Tool name (e.g., 'xdg-open')

        Returns:
            Path to an executable copy of the tool

        Raises:
            ResourceNotFoundError: If the tool is not bundled (and no override
                directory is configured)
            ExtractionError: If writing the script fails
            ToolUnavailableError: If no location is usable

        Example:
            >>> locator = ResourceLocator()
            >>> locator.resolve("xdg-open")
            PosixPath('/tmp/xdgkit/alice/1.1.3/xdg-open')
        """
        tried: List[Path] = []

        override = override_location(tool, self.config)
        if override is not None:
            tried.append(override.path)
            # is_file() first: validating a missing path creates its parents.
            if override.path.is_file() and self.validator.is_usable(override.path):
                logger.debug(f"Using configured script for {tool}: {override.path}")
                return override.path
            logger.warning(
                f"Configured script directory has no usable {tool}: {override.path}"
            )
        else:
            expected = self.bundle.digest(tool)

            for location in cache_locations(tool, self.config):
                tried.append(location.path)
                if not self.validator.is_usable(location.path):
                    logger.debug(f"Skipping unusable location {location}")
                    continue

                if self._materialize(tool, location.path, expected):
                    logger.debug(f"Resolved {tool} to {location}")
                    return location.path

        preinstalled = find_preinstalled(tool, self.config.search_path)
        if preinstalled is not None:
            logger.info(f"Using pre-installed {tool}: {preinstalled}")
            return preinstalled

        tried.extend(c.path for c in search_path_locations(tool, self.config))
        logger.error(f"No usable location for {tool}")
        raise ToolUnavailableError(tool, tried)

    def _materialize(self, tool: str, target: Path, expected: str) -> bool:
        """
        Make the target hold the current script, returning False if the
        target stopped validating before a needed rewrite.
        """
        if target.is_file():
            try:
                if self.extractor.is_current(target, expected):
                    return True
            except IntegrityError as e:
                logger.warning(f"Cannot read existing script, treating as stale: {e}")

            if not self.validator.is_usable(target):
                logger.warning(f"Stale script can no longer be rewritten: {target}")
                return False

        self.extractor.ensure(self.bundle, tool, target, expected_digest=expected)
        return True

    def preload(self, tools: Optional[Iterable[str]] = None) -> Dict[str, Path]:
        """
        Resolve several tools up front, extracting them as needed.

        Args:
            tools: Tool names (default: every bundled script)

        Returns:
            Dict of tool name -> resolved path

        Raises:
            Same as resolve(), for the first tool that fails
        """
        names = list(tools) if tools is not None else self.bundle.names()
        return {name: self.resolve(name) for name in names}


__all__ = ["ResourceLocator"]
