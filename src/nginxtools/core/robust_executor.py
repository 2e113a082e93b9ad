"""Cascade controller for external commands.

RobustExecutor runs a command through the streaming, buffered and
synchronous strategies in that fixed order, stopping at the first success.
Each later attempt gets the same request; earlier failures only show up as
prior_errors on the result. If every strategy fails, a synthetic outcome
whose stderr starts with "All execution methods failed." is returned.
"""

import os
from collections.abc import Sequence

from nginxtools.core.command_executor import (
    CascadeResult,
    CommandExecutor,
    ExecutionOutcome,
    ExecutionRequest,
    build_outcome,
)
from nginxtools.core.config import ServerConfig
from nginxtools.core.executors import BufferedExecutor, StreamingExecutor, SynchronousExecutor
from nginxtools.core.logger import NginxToolsLogger

ALL_FAILED_MESSAGE = "All execution methods failed."


def default_strategies() -> list[CommandExecutor]:
    """Strategies in cascade order."""
    return [StreamingExecutor(), BufferedExecutor(), SynchronousExecutor()]


class RobustExecutor:
    """Run commands through a fixed cascade of execution strategies."""

    def __init__(
        self,
        config: ServerConfig,
        logger: NginxToolsLogger,
        strategies: Sequence[CommandExecutor] | None = None,
    ) -> None:
        """Initialize the executor.

        The process environment is snapshotted here, overlaid with
        config.extra_env, and reused unchanged for every request.

        Args:
            config: Server settings (working directory, timeout)
            logger: Structured logger
            strategies: Strategies in attempt order (default: streaming,
                buffered, synchronous)
        """
        self.config = config
        self.logger = logger
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        if not self.strategies:
            raise ValueError("RobustExecutor needs at least one strategy")
        self._env = {**os.environ, **config.extra_env}

    def build_request(self, argv: Sequence[str]) -> ExecutionRequest:
        return ExecutionRequest(
            argv=tuple(argv),
            cwd=self.config.project_dir,
            timeout_ms=self.config.command_timeout_ms,
            env=self._env,
        )

    async def execute(self, argv: Sequence[str]) -> CascadeResult:
        """Run argv through the cascade.

        Args:
            argv: Command and arguments; argv[0] is the binary

        Returns:
            CascadeResult for the last attempted strategy; never raises
        """
        try:
            request = self.build_request(argv)
        except ValueError as e:
            self.logger.error("Invalid command request", argv=list(argv), error=str(e))
            outcome = build_outcome(
                self.strategies[0].strategy,
                exit_code=1,
                stderr=f"Invalid command: {e}",
                error_message=str(e),
            )
            return CascadeResult.from_outcome(outcome)

        first, *fallbacks = self.strategies
        prior_errors: list[str] = []

        outcome = await self._attempt(first, request)
        for executor in fallbacks:
            if outcome.succeeded:
                break
            self.logger.warn(
                "Execution strategy failed, falling back",
                command=request.command_line,
                method=outcome.strategy.value,
                next_method=executor.get_name(),
                error=outcome.failure_text,
            )
            prior_errors.append(outcome.failure_text)
            outcome = await self._attempt(executor, request)

        if outcome.succeeded:
            result = CascadeResult.from_outcome(
                outcome, fallback_used=bool(prior_errors), prior_errors=prior_errors
            )
        else:
            exhausted = build_outcome(
                outcome.strategy,
                exit_code=1,
                stdout=outcome.stdout,
                stderr=f"{ALL_FAILED_MESSAGE} Last error: {outcome.failure_text}",
                timed_out=outcome.timed_out,
                error_message=ALL_FAILED_MESSAGE,
                duration_ms=outcome.duration_ms,
            )
            result = CascadeResult.from_outcome(
                exhausted,
                reported_exit_code=outcome.exit_code if outcome.command_ran else None,
            )

        self.logger.cascade_result(result, request.command_line)
        return result

    async def _attempt(
        self, executor: CommandExecutor, request: ExecutionRequest
    ) -> ExecutionOutcome:
        """Run one strategy, converting a contract-breaking exception to a failure."""
        try:
            outcome = await executor.execute(request)
        except Exception as e:  # noqa: BLE001
            self.logger.error(
                "Execution strategy raised", method=executor.get_name(), error=str(e)
            )
            message = f"{executor.get_name()} execution raised: {e}"
            outcome = build_outcome(
                executor.strategy,
                exit_code=1,
                stderr=message,
                error_message=message,
            )

        self.logger.attempt(outcome, request.command_line)
        return outcome
