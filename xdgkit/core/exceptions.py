"""
Centralized exception hierarchy for xdgkit.

Provisioning failures (missing resources, extraction errors, no usable
location) are raised as exceptions from this module. Invocation failures are
not: the process runner encodes them as ``ExitCode.WRAPPER_ERROR``.
"""

from pathlib import Path
from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class XdgKitError(Exception):
    """Base exception for all xdgkit errors."""

    pass


class ConfigError(XdgKitError):
    """Configuration loading or validation error."""

    pass


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceError(XdgKitError):
    """Base exception for embedded resource errors."""

    pass


class ResourceNotFoundError(ResourceError):
    """Raised when a bundled script is missing from the package."""

    def __init__(self, name: str, location: Optional[str] = None):
        self.name = name
        self.location = location
        msg = f"Unable to read bundled script: {name}"
        if location:
            msg += f" (looked in {location})"
        super().__init__(msg)


class IntegrityError(ResourceError):
    """Raised when a digest cannot be computed for a stream or file."""

    pass


class ExtractionError(ResourceError):
    """Raised when a bundled script cannot be written to its target file."""

    def __init__(self, target: Path, reason: str):
        self.target = Path(target)
        self.reason = reason
        super().__init__(f"Failed to extract script file {self.target}: {reason}")


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ToolUnavailableError(XdgKitError):
    """Raised when no candidate location yields a usable executable."""

    def __init__(self, tool: str, tried: Sequence[Path] = ()):
        self.tool = tool
        self.tried = [Path(p) for p in tried]
        msg = f"No usable location for tool: {tool}"
        if self.tried:
            msg += " (tried: " + ", ".join(str(p) for p in self.tried) + ")"
        super().__init__(msg)
