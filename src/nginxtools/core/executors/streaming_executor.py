"""Streaming strategy: asyncio subprocess with incrementally read pipes.

The process is spawned directly (no shell). Stdout and stderr are pumped
concurrently and decoded as they arrive, so the event loop stays free for
other requests while the command runs. The timeout is a scoped deadline
armed right after spawn; it is released on every exit path.
"""

import asyncio
import codecs

from nginxtools.core.command_executor import (
    TIMEOUT_EXIT_CODE,
    CommandExecutor,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionStrategy,
    build_outcome,
)


class StreamingExecutor(CommandExecutor):
    """Execute commands with asyncio.create_subprocess_exec and streamed pipes."""

    strategy = ExecutionStrategy.STREAMING

    def __init__(self, chunk_size: int = 4096) -> None:
        """Initialize streaming executor.

        Args:
            chunk_size: Maximum bytes read from a pipe per iteration
        """
        self.chunk_size = chunk_size

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Run the command, reading its output incrementally.

        On timeout the process is sent SIGTERM and the outcome resolves
        immediately with exit code 124; the process is not awaited.

        Args:
            request: Command, working directory, environment and timeout

        Returns:
            ExecutionOutcome; never raises
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        def elapsed_ms() -> int:
            return int((loop.time() - start_time) * 1000)

        try:
            process = await asyncio.create_subprocess_exec(
                *request.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=request.cwd,
                env=dict(request.env),
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

        stdout_chunks: list[str] = []
        stderr_chunks: list[str] = []

        try:
            async with asyncio.timeout(request.timeout_s):
                await asyncio.gather(
                    self._pump(process.stdout, stdout_chunks),
                    self._pump(process.stderr, stderr_chunks),
                )
                exit_code = await process.wait()
        except TimeoutError:
            self._terminate(process)
            return build_outcome(
                self.strategy,
                exit_code=TIMEOUT_EXIT_CODE,
                stdout="".join(stdout_chunks),
                stderr=f"Command timed out after {request.timeout_ms}ms",
                timed_out=True,
                duration_ms=elapsed_ms(),
            )
        except Exception as e:  # noqa: BLE001
            self._terminate(process)
            message = f"Streaming execution failed: {e}"
            return build_outcome(
                self.strategy,
                exit_code=1,
                stdout="".join(stdout_chunks),
                stderr="".join(stderr_chunks) or message,
                error_message=message,
                duration_ms=elapsed_ms(),
            )

        return build_outcome(
            self.strategy,
            exit_code=exit_code,
            stdout="".join(stdout_chunks),
            stderr="".join(stderr_chunks),
            duration_ms=elapsed_ms(),
        )

    async def _pump(self, stream: asyncio.StreamReader | None, chunks: list[str]) -> None:
        """Read a pipe to EOF, decoding UTF-8 across chunk boundaries."""
        if stream is None:
            return
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = await stream.read(self.chunk_size)
            if not data:
                chunks.append(decoder.decode(b"", final=True))
                return
            chunks.append(decoder.decode(data))

    @staticmethod
    def _terminate(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            pass
