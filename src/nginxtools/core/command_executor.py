"""Command execution abstraction.

Defines the request and result types shared by every execution strategy,
the normalizer that turns a strategy's raw outcome into a uniform record,
and the abstract interface each strategy implements.

Strategies never raise: every failure mode (spawn error, non-zero exit,
timeout) is reported through the returned ExecutionOutcome.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

TIMEOUT_EXIT_CODE = 124


class ExecutionStrategy(str, Enum):
    """The ways an external command can be invoked, in cascade order."""

    STREAMING = "streaming"
    BUFFERED = "buffered"
    SYNCHRONOUS = "synchronous"


@dataclass(frozen=True)
class ExecutionRequest:
    """An external command to run.

    Attributes:
        argv: Command and its arguments; argv[0] is the binary
        cwd: Working directory for the command
        timeout_ms: Timeout applied to each strategy attempt
        env: Environment for the command
    """

    argv: tuple[str, ...]
    cwd: str
    timeout_ms: int
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.argv, str) or not self.argv:
            raise ValueError("argv must be a non-empty sequence of strings")
        if self.timeout_ms < 1:
            raise ValueError(f"timeout_ms must be > 0, got {self.timeout_ms}")
        object.__setattr__(self, "argv", tuple(str(arg) for arg in self.argv))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @property
    def timeout_s(self) -> float:
        """Timeout in seconds."""
        return self.timeout_ms / 1000

    @property
    def command_line(self) -> str:
        """Argument vector rendered for display and logs."""
        return " ".join(self.argv)


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of one strategy attempt.

    Attributes:
        stdout: Standard output from command
        stderr: Standard error from command (or a synthetic failure message)
        exit_code: Command exit code (0 = success)
        strategy: Strategy that produced this outcome
        timed_out: True when the attempt hit its timeout
        error_message: Description of why the command could not run, if any
        timestamp: When the outcome was produced (UTC)
        duration_ms: Wall-clock duration of the attempt
    """

    stdout: str
    stderr: str
    exit_code: int
    strategy: ExecutionStrategy
    timed_out: bool = False
    error_message: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    @property
    def failure_text(self) -> str:
        """Best available description of a failed attempt."""
        return self.stderr or self.error_message or f"exit code {self.exit_code}"

    @property
    def command_ran(self) -> bool:
        """True when the command started and reported its own exit status."""
        return self.error_message is None and not self.timed_out


@dataclass(frozen=True)
class CascadeResult:
    """Caller-facing result of running a command through the cascade.

    Carries every field of the last attempted outcome plus provenance:
    whether a fallback strategy was needed and what the earlier
    strategies reported.

    When every strategy failed, exit_code is the synthetic 1 and
    reported_exit_code keeps the status the command itself exited with,
    or None if the last attempt never got one (spawn error, timeout).
    """

    stdout: str
    stderr: str
    exit_code: int
    strategy: ExecutionStrategy
    timed_out: bool
    error_message: str | None
    timestamp: datetime
    duration_ms: int
    fallback_used: bool = False
    prior_errors: tuple[str, ...] = ()
    reported_exit_code: int | None = None

    @classmethod
    def from_outcome(
        cls,
        outcome: ExecutionOutcome,
        fallback_used: bool = False,
        prior_errors: Sequence[str] = (),
        reported_exit_code: int | None = None,
    ) -> "CascadeResult":
        return cls(
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            exit_code=outcome.exit_code,
            strategy=outcome.strategy,
            timed_out=outcome.timed_out,
            error_message=outcome.error_message,
            timestamp=outcome.timestamp,
            duration_ms=outcome.duration_ms,
            fallback_used=fallback_used,
            prior_errors=tuple(prior_errors),
            reported_exit_code=reported_exit_code,
        )

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    @property
    def method(self) -> str:
        """Name of the strategy that produced this result."""
        return self.strategy.value

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view of the result for logs and debug output."""
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "succeeded": self.succeeded,
            "method": self.method,
            "timed_out": self.timed_out,
            "error_message": self.error_message,
            "timestamp": self.timestamp.isoformat(),
            "duration_ms": self.duration_ms,
            "fallback_used": self.fallback_used,
            "prior_errors": list(self.prior_errors),
            "reported_exit_code": self.reported_exit_code,
        }


def to_text(value: str | bytes | None) -> str:
    """Decode captured output that may be bytes, text, or missing."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def build_outcome(
    strategy: ExecutionStrategy,
    *,
    exit_code: int | None,
    stdout: str | bytes | None = "",
    stderr: str | bytes | None = "",
    timed_out: bool = False,
    error_message: str | None = None,
    duration_ms: int = 0,
) -> ExecutionOutcome:
    """Normalize a strategy's raw result into an ExecutionOutcome.

    A missing exit code (the process never reported one) becomes 1.

    Args:
        strategy: Strategy that produced the result
        exit_code: Reported exit status, or None when unavailable
        stdout: Captured standard output (bytes are decoded as UTF-8)
        stderr: Captured standard error (bytes are decoded as UTF-8)
        timed_out: Whether the attempt hit its timeout
        error_message: Why the command could not run, if applicable
        duration_ms: Wall-clock duration of the attempt

    Returns:
        Immutable outcome stamped with the current UTC time
    """
    return ExecutionOutcome(
        stdout=to_text(stdout),
        stderr=to_text(stderr),
        exit_code=1 if exit_code is None else exit_code,
        strategy=strategy,
        timed_out=timed_out,
        error_message=error_message,
        duration_ms=max(duration_ms, 0),
    )


class CommandExecutor(ABC):
    """Abstract interface for one way of executing an external command.

    Implementations differ only in how the OS process is created and
    monitored. They must return an ExecutionOutcome on every path and
    never raise.
    """

    strategy: ExecutionStrategy

    @abstractmethod
    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """Run the command described by request.

        Args:
            request: Command, working directory, environment and timeout

        Returns:
            ExecutionOutcome with stdout, stderr, exit code and timing
        """
        ...

    def get_name(self) -> str:
        """Get executor name for logging/debugging."""
        return self.strategy.value
