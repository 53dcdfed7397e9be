"""
Resolve command implementation.

Prints the executable path for a tool, extracting the script if needed.
"""

import logging

from xdgkit.cli.utils import build_toolkit
from xdgkit.core.exceptions import XdgKitError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the tool cannot be provisioned)
    """
    try:
        path = build_toolkit(args).resolve(args.tool)
    except XdgKitError as e:
        logger.error(str(e))
        return 1

    print(path)
    return 0
