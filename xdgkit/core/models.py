"""
Shared data types for xdgkit.

This module defines the value objects passed between the resolution and
execution layers:

- ToolScript: a bundled script identified by name and version
- ExitCode: the exit status contract shared by all xdg-utils tools
- ExecutionRequest / ExecutionResult: process runner input and output
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import List, Optional, Union

# Version of the bundled xdg-utils scripts.
SCRIPT_VERSION = "1.1.3"

# Directory tag used when building cache locations.
VENDOR_TAG = "xdgkit"

# Chunk size for hashing and extraction.
BUFFER_SIZE = 4096

LINE_FEED = "\n"


class ExitCode(IntEnum):
    """
    Exit statuses returned by the xdg-utils tools.

    Values 0-5 are defined by the tools themselves and are passed through
    unmodified. WRAPPER_ERROR is reserved by xdgkit and means the process
    could not be launched or waited on at all.
    """

    SUCCESS = 0
    SYNTAX_ERROR = 1
    FILE_NOT_FOUND = 2
    REQUIRED_TOOL_MISSING = 3
    ACTION_FAILED = 4
    PERMISSION_DENIED = 5
    WRAPPER_ERROR = -(2**31)


WRAPPER_ERROR = int(ExitCode.WRAPPER_ERROR)


@dataclass(frozen=True)
class ToolScript:
    """
    A bundled script and the digest of its embedded content.

    Attributes:
        name: Logical tool name (e.g., 'xdg-open')
        version: Version of the bundled script set
        digest: Hex digest of the embedded bytes
    """

    name: str
    version: str
    digest: str


@dataclass
class ExecutionRequest:
    """
    A single process invocation.

    Arguments are passed through literally, including empty strings.
    Callers are responsible for omitting arguments the tool would reject.
    """

    executable: Union[str, Path]
    args: List[str] = field(default_factory=list)
    capture_output: bool = True

    @property
    def argv(self) -> List[str]:
        """Full argument vector, executable first."""
        return [str(self.executable), *self.args]


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of a process invocation.

    Attributes:
        output: Captured stdout with lines joined by '\\n' and no trailing
            separator, or None when capture was not requested
        exit_status: Process exit status, or WRAPPER_ERROR
    """

    output: Optional[str]
    exit_status: int

    @property
    def succeeded(self) -> bool:
        return self.exit_status == ExitCode.SUCCESS

    @property
    def wrapper_failed(self) -> bool:
        return self.exit_status == WRAPPER_ERROR

    @property
    def exit_code(self) -> Optional[ExitCode]:
        """Known ExitCode member for the status, or None if undocumented."""
        try:
            return ExitCode(self.exit_status)
        except ValueError:
            return None

    def __bool__(self):
        """Allow using result in boolean context."""
        return self.succeeded
