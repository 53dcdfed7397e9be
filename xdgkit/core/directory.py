"""
Candidate locations for extracted scripts.

Locations are tried in a fixed priority order:

    OVERRIDE     {script_dir}/{tool}
    TEMP         {temp-dir}/{vendor-tag}/{user}/{version}/{tool}
    HOME         {home-dir}/.{vendor-tag}/{version}/{tool}
    WORKING      {working-dir}/.tmp/{vendor-tag}/{version}/{tool}
    SEARCH_PATH  {search dir}/{tool}, for each configured search dir

The OVERRIDE tier only exists when a script directory is configured.
SEARCH_PATH entries point at pre-installed tools that xdgkit does not own.
"""

import getpass
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from xdgkit.config.parser import XdgKitConfig

logger = logging.getLogger(__name__)


class Tier(IntEnum):
    """Candidate location tiers, lowest value tried first."""

    OVERRIDE = 0
    TEMP = 1
    HOME = 2
    WORKING = 3
    SEARCH_PATH = 4

    @property
    def extracts(self) -> bool:
        """Whether xdgkit owns and extracts files at this tier."""
        return self in (Tier.TEMP, Tier.HOME, Tier.WORKING)


@dataclass(frozen=True)
class CandidateLocation:
    """A tier and the concrete path it produced for one tool."""

    tier: Tier
    path: Path

    def __str__(self):
        return f"{self.tier.name.lower()}:{self.path}"


def current_user(config: XdgKitConfig) -> str:
    """
    Get the user name used in the per-user temp directory.

    Returns:
        Configured user, else the login name, else the numeric uid
    """
    if config.user:
        return config.user
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No passwd entry and no USER/LOGNAME variables, e.g. in containers
        return str(os.getuid()) if hasattr(os, "getuid") else "default"


def temp_cache_dir(config: XdgKitConfig) -> Path:
    base = Path(config.temp_dir) if config.temp_dir else Path(tempfile.gettempdir())
    return base / config.vendor_tag / current_user(config) / config.script_version


def home_cache_dir(config: XdgKitConfig) -> Path:
    base = Path(config.home_dir) if config.home_dir else Path.home()
    return base / f".{config.vendor_tag}" / config.script_version


def working_cache_dir(config: XdgKitConfig) -> Path:
    base = Path(config.working_dir) if config.working_dir else Path(".")
    return base / ".tmp" / config.vendor_tag / config.script_version


def cache_locations(tool: str, config: XdgKitConfig) -> List[CandidateLocation]:
    """
    Get the extraction tiers for a tool, in priority order.

    Args:
        tool: Tool name
        config: Resolution configuration

    Returns:
        TEMP, HOME and WORKING locations

    Example:
        >>> [str(c) for c in cache_locations("xdg-open", config)]
        ['temp:/tmp/xdgkit/alice/1.1.3/xdg-open', 'home:/home/alice/.xdgkit/1.1.3/xdg-open', 'working:.tmp/xdgkit/1.1.3/xdg-open']
    """
    return [
        CandidateLocation(Tier.TEMP, temp_cache_dir(config) / tool),
        CandidateLocation(Tier.HOME, home_cache_dir(config) / tool),
        CandidateLocation(Tier.WORKING, working_cache_dir(config) / tool),
    ]


def override_location(tool: str, config: XdgKitConfig) -> Optional[CandidateLocation]:
    if config.script_dir is None:
        return None
    return CandidateLocation(Tier.OVERRIDE, Path(config.script_dir) / tool)


def search_path_locations(tool: str, config: XdgKitConfig) -> List[CandidateLocation]:
    return [
        CandidateLocation(Tier.SEARCH_PATH, Path(directory) / tool)
        for directory in config.search_path
        if directory
    ]


def candidate_locations(tool: str, config: XdgKitConfig) -> List[CandidateLocation]:
    """
    Get every candidate location for a tool, in priority order.

    Args:
        tool: Tool name
        config: Resolution configuration

    Returns:
        Ordered candidates, OVERRIDE first (if configured), SEARCH_PATH last
    """
    result = []
    override = override_location(tool, config)
    if override is not None:
        result.append(override)
    result.extend(cache_locations(tool, config))
    result.extend(search_path_locations(tool, config))
    return result


def find_preinstalled(
    tool: str, search_path: Iterable[Union[str, Path]]
) -> Optional[Path]:
    """
    Find an already-installed tool in a list of directories.

    Args:
        tool: Tool name
        search_path: Directories to search, in order

    Returns:
        First path that is an executable regular file, or None

    Example:
        >>> find_preinstalled("xdg-open", ["/usr/local/bin", "/usr/bin"])
        PosixPath('/usr/bin/xdg-open')
    """
    for directory in search_path:
        if not directory:
            continue
        candidate = Path(directory) / tool
        if candidate.is_file() and os.access(candidate, os.X_OK):
            logger.debug(f"Found pre-installed {tool} at {candidate}")
            return candidate

    return None


__all__ = [
    "Tier",
    "CandidateLocation",
    "candidate_locations",
    "cache_locations",
    "override_location",
    "search_path_locations",
    "find_preinstalled",
    "current_user",
    "temp_cache_dir",
    "home_cache_dir",
    "working_cache_dir",
]
