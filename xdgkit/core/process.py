"""
Subprocess execution for resolved tools.

ProcessRunner launches an executable, optionally captures its standard output
line by line, waits for it to exit and returns the exit status unchanged.
Failures of the runner itself (the process could not be started, or reading
and waiting failed) are not raised: they are logged and reported as
``ExitCode.WRAPPER_ERROR``, a value no xdg-utils tool returns. Callers branch
on one integer status either way.

There is no timeout. A caller needing bounded latency must enforce its own
deadline.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from xdgkit.core.models import (
    LINE_FEED,
    WRAPPER_ERROR,
    ExecutionRequest,
    ExecutionResult,
)

logger = logging.getLogger(__name__)

_RUNNER_ERRORS = (OSError, ValueError, subprocess.SubprocessError)


def _read_lines(stream) -> str:
    lines: List[str] = []
    for line in stream:
        lines.append(line.rstrip(LINE_FEED))
    return LINE_FEED.join(lines)


def _terminate(process: subprocess.Popen) -> None:
    if process.poll() is not None:
        return
    try:
        process.kill()
        process.wait()
    except OSError as e:
        logger.warning(f"Failed to kill process {process.pid}: {e}")


class ProcessRunner:
    """
    Runs tool executables and reports (output, exit status).

    Attributes:
        encoding: Text encoding used to decode captured output
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def execute(
        self,
        path: Union[str, Path],
        args: Optional[Sequence[str]] = None,
        capture_output: bool = True,
    ) -> ExecutionResult:
        """
        Run an executable and wait for it to finish.

        Args:
            path: Executable to run
            args: Arguments passed literally, empty strings included
            capture_output: Capture stdout; otherwise stdout is discarded

        Returns:
            ExecutionResult with the captured text (None without capture)
            and the process exit status, or WRAPPER_ERROR if the process
            could not be run

        Example:
            >>> runner = ProcessRunner()
            >>> runner.execute("/bin/echo", ["hello"])
            ExecutionResult(output='hello', exit_status=0)
        """
        request = ExecutionRequest(
            executable=path,
            args=list(args) if args is not None else [],
            capture_output=capture_output,
        )
        return self.run(request)

    def run(self, request: ExecutionRequest) -> ExecutionResult:
        """
        Run an ExecutionRequest.

        Returns:
            ExecutionResult (never raises for launch or wait failures)
        """
        argv = request.argv
        logger.debug(f"Running: {argv}")

        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE if request.capture_output else subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding=self.encoding,
                errors="replace",
            )
        except _RUNNER_ERRORS as e:
            logger.error(f"Failed to launch {argv[0]}: {e}")
            return ExecutionResult(
                output="" if request.capture_output else None,
                exit_status=WRAPPER_ERROR,
            )

        output: Optional[str] = "" if request.capture_output else None
        try:
            if request.capture_output:
                with process.stdout:
                    output = _read_lines(process.stdout)
            exit_status = process.wait()
        except _RUNNER_ERRORS as e:
            logger.error(f"Failed while waiting for {argv[0]}: {e}")
            _terminate(process)
            return ExecutionResult(output=output, exit_status=WRAPPER_ERROR)

        logger.debug(f"{argv[0]} exited with status {exit_status}")
        return ExecutionResult(output=output, exit_status=exit_status)


__all__ = ["ProcessRunner"]
