"""
Run command implementation.

Resolves a tool, runs it with the remaining arguments and exits with the
tool's own status.
"""

import logging

from xdgkit.cli.utils import build_toolkit
from xdgkit.core.exceptions import XdgKitError
from xdgkit.core.models import WRAPPER_ERROR

logger = logging.getLogger(__name__)

# EX_SOFTWARE from sysexits.h; the runner's sentinel does not fit in a
# shell exit status.
WRAPPER_ERROR_EXIT = 70


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        The tool's exit status, 1 if provisioning failed, or
        WRAPPER_ERROR_EXIT if the tool could not be run
    """
    tool_args = list(args.tool_args or [])
    if tool_args and tool_args[0] == "--":
        tool_args = tool_args[1:]

    try:
        result = build_toolkit(args).run(args.tool, tool_args)
    except XdgKitError as e:
        logger.error(str(e))
        return 1

    if result.output:
        print(result.output)

    if result.exit_status == WRAPPER_ERROR:
        logger.error(f"Could not run {args.tool}")
        return WRAPPER_ERROR_EXIT

    return result.exit_status
