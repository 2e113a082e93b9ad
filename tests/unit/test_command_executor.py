"""Unit tests for the command execution data model and normalizer."""

from datetime import UTC

import pytest

from nginxtools.core.command_executor import (
    TIMEOUT_EXIT_CODE,
    CascadeResult,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionStrategy,
    build_outcome,
    to_text,
)


class TestExecutionRequest:
    """Test ExecutionRequest validation and immutability."""

    def test_create_request(self) -> None:
        request = ExecutionRequest(
            argv=["docker", "compose", "ps"],
            cwd="/tmp",
            timeout_ms=15000,
            env={"PATH": "/usr/bin"},
        )
        assert request.argv == ("docker", "compose", "ps")
        assert request.timeout_s == 15.0
        assert request.command_line == "docker compose ps"
        assert request.env["PATH"] == "/usr/bin"

    def test_empty_argv_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            ExecutionRequest(argv=(), cwd="/tmp", timeout_ms=1000)

    def test_string_argv_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty sequence"):
            ExecutionRequest(
                argv="docker compose ps", cwd="/tmp", timeout_ms=1000  # type: ignore[arg-type]
            )

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValueError, match="timeout_ms must be > 0"):
            ExecutionRequest(argv=("echo",), cwd="/tmp", timeout_ms=0)

    def test_env_is_copied_and_read_only(self) -> None:
        env = {"A": "1"}
        request = ExecutionRequest(argv=("echo",), cwd="/tmp", timeout_ms=1000, env=env)
        env["A"] = "2"

        assert request.env["A"] == "1"
        with pytest.raises(TypeError):
            request.env["B"] = "3"  # type: ignore[index]

    def test_request_is_frozen(self) -> None:
        request = ExecutionRequest(argv=("echo",), cwd="/tmp", timeout_ms=1000)
        with pytest.raises(AttributeError):
            request.cwd = "/"  # type: ignore[misc]


class TestBuildOutcome:
    """Test the outcome normalizer."""

    def test_success(self) -> None:
        outcome = build_outcome(ExecutionStrategy.STREAMING, exit_code=0, stdout="ok\n")
        assert outcome.succeeded is True
        assert outcome.stdout == "ok\n"
        assert outcome.stderr == ""
        assert outcome.strategy is ExecutionStrategy.STREAMING
        assert outcome.timestamp.tzinfo is UTC

    def test_missing_exit_code_becomes_one(self) -> None:
        outcome = build_outcome(ExecutionStrategy.BUFFERED, exit_code=None, stderr="killed")
        assert outcome.exit_code == 1
        assert outcome.succeeded is False

    def test_bytes_are_decoded(self) -> None:
        outcome = build_outcome(
            ExecutionStrategy.SYNCHRONOUS,
            exit_code=0,
            stdout="héllo".encode(),
            stderr=b"\xff",
        )
        assert outcome.stdout == "héllo"
        assert outcome.stderr == "�"

    def test_none_output_becomes_empty(self) -> None:
        outcome = build_outcome(
            ExecutionStrategy.SYNCHRONOUS, exit_code=1, stdout=None, stderr=None
        )
        assert outcome.stdout == ""
        assert outcome.stderr == ""

    def test_timed_out_is_never_success(self) -> None:
        outcome = build_outcome(ExecutionStrategy.STREAMING, exit_code=0, timed_out=True)
        assert outcome.succeeded is False

    def test_failure_text_prefers_stderr(self) -> None:
        with_stderr = build_outcome(
            ExecutionStrategy.STREAMING, exit_code=2, stderr="bad", error_message="msg"
        )
        with_message = build_outcome(ExecutionStrategy.STREAMING, exit_code=1, error_message="msg")
        bare = build_outcome(ExecutionStrategy.STREAMING, exit_code=5)

        assert with_stderr.failure_text == "bad"
        assert with_message.failure_text == "msg"
        assert bare.failure_text == "exit code 5"

    def test_to_text(self) -> None:
        assert to_text(None) == ""
        assert to_text(b"abc") == "abc"
        assert to_text("abc") == "abc"


class TestCascadeResult:
    """Test CascadeResult construction and views."""

    def _outcome(self, **kwargs) -> ExecutionOutcome:
        defaults = {"exit_code": 0, "stdout": "out", "stderr": ""}
        defaults.update(kwargs)
        return build_outcome(ExecutionStrategy.BUFFERED, **defaults)

    def test_from_outcome_copies_fields(self) -> None:
        outcome = self._outcome(duration_ms=42)
        result = CascadeResult.from_outcome(outcome, fallback_used=True, prior_errors=["boom"])

        assert result.stdout == "out"
        assert result.exit_code == 0
        assert result.succeeded is True
        assert result.strategy is ExecutionStrategy.BUFFERED
        assert result.timestamp == outcome.timestamp
        assert result.duration_ms == 42
        assert result.fallback_used is True
        assert result.prior_errors == ("boom",)
        assert result.method == "buffered"

    def test_defaults(self) -> None:
        result = CascadeResult.from_outcome(self._outcome())
        assert result.fallback_used is False
        assert result.prior_errors == ()

    def test_timeout_result(self) -> None:
        outcome = build_outcome(
            ExecutionStrategy.STREAMING,
            exit_code=TIMEOUT_EXIT_CODE,
            stderr="Command timed out after 10ms",
            timed_out=True,
        )
        result = CascadeResult.from_outcome(outcome)
        assert result.succeeded is False
        assert result.timed_out is True
        assert result.exit_code == 124

    def test_to_dict(self) -> None:
        result = CascadeResult.from_outcome(
            self._outcome(exit_code=3, stderr="err"), fallback_used=True, prior_errors=("a",)
        )
        data = result.to_dict()

        assert data["exit_code"] == 3
        assert data["succeeded"] is False
        assert data["method"] == "buffered"
        assert data["prior_errors"] == ["a"]
        assert data["fallback_used"] is True
        assert isinstance(data["timestamp"], str)
