"""
Preload command implementation.

Extracts bundled tools to the cache so later calls skip extraction.
"""

import logging

from xdgkit.cli.utils import build_toolkit, selected_tools
from xdgkit.core.exceptions import XdgKitError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the preload command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    toolkit = build_toolkit(args)
    tools = selected_tools(toolkit, args.tools)

    try:
        paths = toolkit.preload(tools)
    except XdgKitError as e:
        logger.error(str(e))
        return 1

    for name, path in paths.items():
        print(f"{name}: {path}")

    return 0
