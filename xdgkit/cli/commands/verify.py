"""
Verify command implementation.

Compares cached copies of each tool with the bundled script without writing
anything. The first cached copy found in tier order is the one reported.

Locations are not validated, since validation may create directories and
change file modes. resolve() may therefore skip the reported copy when its
location is not writable and executable, and use a later tier instead.
"""

import logging
from typing import Optional, Tuple

from xdgkit.cli.utils import build_toolkit, selected_tools
from xdgkit.config.parser import XdgKitConfig
from xdgkit.core.directory import CandidateLocation, cache_locations
from xdgkit.core.exceptions import IntegrityError, ResourceNotFoundError
from xdgkit.core.resources import ResourceBundle
from xdgkit.core.verification import compute_file_hash, digests_match

logger = logging.getLogger(__name__)

STATUS_CURRENT = "current"
STATUS_STALE = "stale"
STATUS_MISSING = "missing"
STATUS_UNREADABLE = "unreadable"


def check_tool(
    tool: str, bundle: ResourceBundle, config: XdgKitConfig
) -> Tuple[str, Optional[CandidateLocation]]:
    """
    Check the first existing cached copy of one tool.

    Only existence is checked, not whether resolve() could still use or
    rewrite the copy.

    Args:
        tool: Tool name
        bundle: Bundled scripts
        config: Resolution configuration

    Returns:
        (status, location) where location is None when nothing is cached

    Raises:
        ResourceNotFoundError: If the tool is not bundled
    """
    expected = bundle.digest(tool)

    for location in cache_locations(tool, config):
        if not location.path.is_file():
            continue
        try:
            actual = compute_file_hash(location.path, bundle.algorithm)
        except IntegrityError as e:
            logger.debug(str(e))
            return STATUS_UNREADABLE, location
        if digests_match(actual, expected):
            return STATUS_CURRENT, location
        return STATUS_STALE, location

    return STATUS_MISSING, None


def run(args) -> int:
    """
    Run the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if no cached copy is stale, 1 otherwise)
    """
    toolkit = build_toolkit(args)
    config = toolkit.config
    bundle = toolkit.locator.bundle

    if config.script_dir is not None:
        print(f"Scripts are taken from {config.script_dir}; nothing to verify")
        return 0

    failed = False
    for tool in selected_tools(toolkit, args.tools):
        try:
            status, location = check_tool(tool, bundle, config)
        except ResourceNotFoundError as e:
            logger.error(str(e))
            failed = True
            continue

        if status in (STATUS_STALE, STATUS_UNREADABLE):
            failed = True

        where = f" ({location})" if location is not None else ""
        print(f"{tool}: {status}{where}")

    return 1 if failed else 0
