"""
xdgkit - run the bundled xdg-utils scripts from Python.

The package extracts versioned copies of the xdg-utils scripts to a per-user
cache, keeps them in sync with the embedded originals and runs them as
subprocesses.
"""

from xdgkit.config import XdgKitConfig, load_config
from xdgkit.core import (
    ExitCode,
    ExecutionResult,
    ExtractionError,
    ResourceNotFoundError,
    ToolUnavailableError,
    WRAPPER_ERROR,
    XdgKitError,
)
from xdgkit.core.locator import ResourceLocator
from xdgkit.core.process import ProcessRunner
from xdgkit.toolkit import XdgToolkit

__version__ = "0.1.0"

__all__ = [
    "ExitCode",
    "ExecutionResult",
    "ExtractionError",
    "ProcessRunner",
    "ResourceLocator",
    "ResourceNotFoundError",
    "ToolUnavailableError",
    "WRAPPER_ERROR",
    "XdgKitConfig",
    "XdgKitError",
    "XdgToolkit",
    "load_config",
]
