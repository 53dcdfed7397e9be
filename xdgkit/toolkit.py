"""
Entry point combining script resolution and execution.

XdgToolkit is the seam tool facades call: it resolves a tool name to an
executable and runs it with a prepared argument list. It does not build
arguments for any particular tool.

Example:
    >>> from xdgkit import XdgToolkit
    >>> toolkit = XdgToolkit()
    >>> result = toolkit.run("xdg-mime", ["query", "default", "text/html"])
    >>> if result.succeeded:
    ...     print(result.output)
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

from xdgkit.config.parser import XdgKitConfig, load_config
from xdgkit.core.locator import ResourceLocator
from xdgkit.core.models import ExecutionResult
from xdgkit.core.process import ProcessRunner

logger = logging.getLogger(__name__)

# Option understood by every xdg-utils tool.
VERSION_OPTION = "--version"


class XdgToolkit:
    """
    Resolves and runs bundled xdg-utils tools.

    Attributes:
        locator: Resolves tool names to executables
        runner: Runs executables
    """

    def __init__(
        self,
        config: Optional[XdgKitConfig] = None,
        locator: Optional[ResourceLocator] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        if locator is None:
            locator = ResourceLocator(config if config is not None else load_config())
        self.locator = locator
        self.runner = runner if runner is not None else ProcessRunner()

    @property
    def config(self) -> XdgKitConfig:
        return self.locator.config

    def resolve(self, tool: str) -> Path:
        return self.locator.resolve(tool)

    def run(
        self,
        tool: str,
        args: Optional[Sequence[str]] = None,
        capture_output: bool = True,
    ) -> ExecutionResult:
        """
        Resolve a tool and run it.

        Provisioning errors are raised; execution failures come back as
        ExitCode.WRAPPER_ERROR in the result.

        Args:
            tool: Tool name
            args: Arguments after the executable
            capture_output: Capture stdout

        Returns:
            ExecutionResult

        Raises:
            ResourceNotFoundError, ExtractionError, ToolUnavailableError
        """
        path = self.locator.resolve(tool)
        return self.runner.execute(path, args, capture_output=capture_output)

    def version(self, tool: str) -> ExecutionResult:
        """Run a tool with --version."""
        return self.run(tool, [VERSION_OPTION])

    def preload(self, tools: Optional[Iterable[str]] = None) -> Dict[str, Path]:
        """Extract tools ahead of time; see ResourceLocator.preload()."""
        paths = self.locator.preload(tools)
        logger.info(f"Preloaded {len(paths)} tools")
        return paths


__all__ = [
    "VERSION_OPTION",
    "XdgToolkit",
]
