"""Buffered strategy: shell subprocess with all output collected at exit.

Runs the argument vector as a quoted shell command line and buffers the
whole of stdout/stderr with communicate(). Some hosts that refuse direct
exec with streamed pipes still allow this path, which is why it exists
alongside the streaming strategy.
"""

import asyncio
import os
import shlex
import sys
from dataclasses import dataclass

from nginxtools.core.command_executor import (
    CommandExecutor,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionStrategy,
    build_outcome,
)


@dataclass
class BufferedCommandError(Exception):
    """Failure of a buffered run, carrying whatever output it captured."""

    message: str
    stdout: bytes = b""
    stderr: bytes = b""
    code: int | None = None
    timed_out: bool = False

    def __post_init__(self) -> None:
        super().__init__(self.message)


class BufferedExecutor(CommandExecutor):
    """Execute commands using asyncio.create_subprocess_shell and communicate()."""

    strategy = ExecutionStrategy.BUFFERED

    def __init__(
        self,
        max_output_lines: int = 10000,
        max_output_bytes: int = 1024 * 1024,  # 1MB
    ) -> None:
        """Initialize buffered executor.

        Args:
            max_output_lines: Maximum output lines before truncation
            max_output_bytes: Maximum output bytes before truncation (1MB default)
        """
        self.max_output_lines = max_output_lines
        self.max_output_bytes = max_output_bytes

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Run the command and convert any failure into an outcome.

        Args:
            request: Command, working directory, environment and timeout

        Returns:
            ExecutionOutcome; never raises
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        try:
            stdout_data, stderr_data = await self._run(request)
        except BufferedCommandError as e:
            stdout, stderr = self._truncate(e.stdout, e.stderr)
            return build_outcome(
                self.strategy,
                exit_code=e.code,
                stdout=stdout,
                stderr=stderr or e.message,
                timed_out=e.timed_out,
                # a reported exit code means the command itself ran
                error_message=None if e.code is not None else e.message,
                duration_ms=int((loop.time() - start_time) * 1000),
            )
        except Exception as e:  # noqa: BLE001
            message = f"Buffered execution failed: {e}"
            return build_outcome(
                self.strategy,
                exit_code=1,
                stdout="",
                stderr=message,
                error_message=message,
                duration_ms=int((loop.time() - start_time) * 1000),
            )

        stdout, stderr = self._truncate(stdout_data, stderr_data)
        return build_outcome(
            self.strategy,
            exit_code=0,
            stdout=stdout,
            stderr=stderr,
            duration_ms=int((loop.time() - start_time) * 1000),
        )

    async def _run(self, request: ExecutionRequest) -> tuple[bytes, bytes]:
        """Run to completion, raising BufferedCommandError on any failure."""
        # New process group so a timeout can kill the whole shell tree
        preexec = os.setpgrp if sys.platform != "win32" else None
        command = shlex.join(request.argv)

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=request.cwd,
                env=dict(request.env),
                preexec_fn=preexec,
            )
        except (OSError, ValueError, TypeError) as e:
            raise BufferedCommandError(f"Failed to execute command: {e}") from e

        try:
            stdout_data, stderr_data = await asyncio.wait_for(
                process.communicate(), timeout=request.timeout_s
            )
        except TimeoutError:
            try:
                if sys.platform != "win32":
                    os.killpg(os.getpgid(process.pid), 9)
                else:
                    process.kill()
                await process.wait()
            except ProcessLookupError:
                pass

            raise BufferedCommandError(
                f"Command timed out after {request.timeout_ms}ms: {command}",
                timed_out=True,
            ) from None

        if process.returncode:
            raise BufferedCommandError(
                f"Command failed with exit code {process.returncode}: {command}",
                stdout=stdout_data,
                stderr=stderr_data,
                code=process.returncode,
            )

        return stdout_data, stderr_data

    def _truncate(self, stdout_data: bytes, stderr_data: bytes) -> tuple[str, str]:
        """Decode output, truncating when byte or line limits are exceeded."""
        stdout = stdout_data.decode("utf-8", errors="replace")
        stderr = stderr_data.decode("utf-8", errors="replace")

        # Check both byte size and line count limits (whichever hits first)
        total_bytes = len(stdout_data) + len(stderr_data)
        stdout_lines = stdout.splitlines()
        stderr_lines = stderr.splitlines()
        total_lines = len(stdout_lines) + len(stderr_lines)

        if total_bytes > self.max_output_bytes:
            truncated_msg = f"... [Output truncated - exceeded {self.max_output_bytes} bytes]"
            half_limit = self.max_output_bytes // 2
            if len(stdout_data) > half_limit:
                stdout = (
                    stdout_data[:half_limit].decode("utf-8", errors="replace")
                    + "\n"
                    + truncated_msg
                )
            if len(stderr_data) > half_limit:
                stderr = (
                    stderr_data[:half_limit].decode("utf-8", errors="replace")
                    + "\n"
                    + truncated_msg
                )
        elif total_lines > self.max_output_lines:
            truncated_msg = f"... [Output truncated - exceeded {self.max_output_lines} lines]"
            half_limit = self.max_output_lines // 2
            if len(stdout_lines) > half_limit:
                stdout = "\n".join(stdout_lines[:half_limit]) + "\n" + truncated_msg
            if len(stderr_lines) > half_limit:
                stderr = "\n".join(stderr_lines[:half_limit]) + "\n" + truncated_msg

        return stdout, stderr
