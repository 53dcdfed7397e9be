"""
Shared utilities for CLI commands.
"""

import logging
from typing import List

from xdgkit.config.parser import XdgKitConfig, load_config
from xdgkit.toolkit import XdgToolkit

logger = logging.getLogger(__name__)


def load_cli_config(args) -> XdgKitConfig:
    """
    Build the configuration for a CLI invocation.

    The --script-dir flag wins over the file and the environment.

    Args:
        args: Parsed arguments with config and script_dir

    Returns:
        Assembled configuration

    Raises:
        ConfigError: If the configuration file is invalid
    """
    overrides = {}
    if getattr(args, "script_dir", None) is not None:
        overrides["script_dir"] = args.script_dir

    return load_config(getattr(args, "config", None), **overrides)


def build_toolkit(args) -> XdgToolkit:
    """Create a toolkit for the parsed CLI arguments."""
    return XdgToolkit(load_cli_config(args))


def selected_tools(toolkit: XdgToolkit, requested: List[str]) -> List[str]:
    """
    Get the tools a command should act on.

    Args:
        toolkit: Toolkit whose bundle lists the available tools
        requested: Tools named on the command line

    Returns:
        The requested tools, or every bundled tool when none were named
    """
    if requested:
        return list(requested)

    names = toolkit.locator.bundle.names()
    if not names:
        logger.warning("No bundled scripts found")
    return names
