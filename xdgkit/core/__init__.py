"""
Core functionality for xdgkit.

This package contains the building blocks of script provisioning and
execution. The modules that depend on configuration (``directory`` and
``locator``) are imported from their own modules.
"""

from .exceptions import (
    XdgKitError,
    ConfigError,
    ResourceError,
    ResourceNotFoundError,
    IntegrityError,
    ExtractionError,
    ToolUnavailableError,
)

from .models import (
    SCRIPT_VERSION,
    VENDOR_TAG,
    WRAPPER_ERROR,
    ExitCode,
    ToolScript,
    ExecutionRequest,
    ExecutionResult,
)

from .verification import (
    DIGEST_LENGTH,
    compute_stream_hash,
    compute_file_hash,
    digests_match,
)

from .permissions import PermissionValidator
from .locking import ExtractionLock
from .resources import ResourceBundle
from .extraction import Extractor
from .process import ProcessRunner

__all__ = [
    "XdgKitError",
    "ConfigError",
    "ResourceError",
    "ResourceNotFoundError",
    "IntegrityError",
    "ExtractionError",
    "ToolUnavailableError",
    "SCRIPT_VERSION",
    "VENDOR_TAG",
    "WRAPPER_ERROR",
    "ExitCode",
    "ToolScript",
    "ExecutionRequest",
    "ExecutionResult",
    "DIGEST_LENGTH",
    "compute_stream_hash",
    "compute_file_hash",
    "digests_match",
    "PermissionValidator",
    "ExtractionLock",
    "ResourceBundle",
    "Extractor",
    "ProcessRunner",
]
