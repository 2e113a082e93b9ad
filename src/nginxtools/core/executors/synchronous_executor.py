"""Synchronous strategy: blocking subprocess.check_output.

This blocks the event loop for up to the request timeout, so it only ever
runs as the last strategy, for runtimes where both asyncio subprocess
paths are unavailable.
"""

import subprocess
import time

from nginxtools.core.command_executor import (
    CommandExecutor,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionStrategy,
    build_outcome,
    to_text,
)


class SynchronousExecutor(CommandExecutor):
    """Execute commands with a blocking subprocess call."""

    strategy = ExecutionStrategy.SYNCHRONOUS

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Run the command on the calling thread and convert failures.

        Args:
            request: Command, working directory, environment and timeout

        Returns:
            ExecutionOutcome; never raises
        """
        start_time = time.monotonic()

        def elapsed_ms() -> int:
            return int((time.monotonic() - start_time) * 1000)

        try:
            output = subprocess.check_output(
                list(request.argv),
                stdin=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                cwd=request.cwd,
                env=dict(request.env),
                timeout=request.timeout_s,
            )
        except subprocess.CalledProcessError as e:
            return build_outcome(
                self.strategy,
                exit_code=e.returncode if e.returncode else None,
                stdout=e.output,
                stderr=to_text(e.stderr) or str(e),
                duration_ms=elapsed_ms(),
            )
        except subprocess.TimeoutExpired as e:
            message = f"Command timed out after {request.timeout_ms}ms"
            return build_outcome(
                self.strategy,
                exit_code=None,
                stdout=e.output,
                stderr=to_text(e.stderr) or message,
                timed_out=True,
                error_message=message,
                duration_ms=elapsed_ms(),
            )
        except (OSError, ValueError, TypeError) as e:
            message = f"Failed to start '{request.argv[0]}': {e}"
            return build_outcome(
                self.strategy,
                exit_code=1,
                stdout="",
                stderr=message,
                error_message=message,
                duration_ms=elapsed_ms(),
            )
        except Exception as e:  # noqa: BLE001
            message = f"Synchronous execution failed: {e}"
            return build_outcome(
                self.strategy,
                exit_code=1,
                stderr=message,
                error_message=message,
                duration_ms=elapsed_ms(),
            )

        return build_outcome(
            self.strategy,
            exit_code=0,
            stdout=output,
            stderr="",
            duration_ms=elapsed_ms(),
        )
