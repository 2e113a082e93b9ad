"""Tests for docker compose lifecycle and log tools."""

import pytest

from nginxtools.core.exceptions import E_TIMEOUT, E_UNAVAILABLE, E_VALIDATION
from nginxtools.core.tool_protocol import ToolCall
from nginxtools.tools.compose import (
    ContainerStatusTool,
    LogsTool,
    RestartTool,
    StartTool,
    StopTool,
)


class TestContainerStatusTool:
    @pytest.mark.asyncio
    async def test_runs_compose_ps(self, context, executor, make_result):
        executor.execute.return_value = make_result(
            stdout="nginx   running   0.0.0.0:8080->80/tcp\n"
        )

        result = await ContainerStatusTool().execute(
            ToolCall(name="nginx_container_status"), context
        )

        executor.execute.assert_awaited_once_with(["docker", "compose", "ps", "nginx"])
        assert result.success is True
        assert "0.0.0.0:8080->80/tcp" in result.output

    @pytest.mark.asyncio
    async def test_docker_missing(self, context, executor, exhausted):
        executor.execute.return_value = exhausted

        result = await ContainerStatusTool().execute(
            ToolCall(name="nginx_container_status"), context
        )

        assert result.success is False
        assert result.error_code == E_UNAVAILABLE
        assert "Check that Docker is installed" in result.output


class TestLogsTool:
    @pytest.mark.asyncio
    async def test_default_tail(self, context, executor):
        result = await LogsTool().execute(ToolCall(name="nginx_logs"), context)

        executor.execute.assert_awaited_once_with(
            ["docker", "compose", "logs", "--tail", "50", "nginx"]
        )
        assert "NGINX logs (last 50 lines)" in result.output

    @pytest.mark.asyncio
    async def test_custom_tail(self, context, executor):
        await LogsTool().execute(ToolCall(name="nginx_logs", arguments={"lines": 200}), context)

        argv = executor.execute.await_args.args[0]
        assert argv[-2:] == ["200", "nginx"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lines", ["10", 1.5, True, None])
    async def test_lines_must_be_integer(self, context, executor, lines):
        result = await LogsTool().execute(
            ToolCall(name="nginx_logs", arguments={"lines": lines}), context
        )

        assert result.success is False
        assert result.error == "lines must be an integer"
        assert result.error_code == E_VALIDATION
        executor.execute.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lines", [0, -1, 1001])
    async def test_lines_range(self, context, executor, lines):
        result = await LogsTool().execute(
            ToolCall(name="nginx_logs", arguments={"lines": lines}), context
        )

        assert result.error == "lines must be between 1 and 1000"
        executor.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_timeout_reported(self, context, executor, make_result):
        executor.execute.return_value = make_result(
            exit_code=124, timed_out=True, stderr="Command timed out after 15000ms"
        )

        result = await LogsTool().execute(ToolCall(name="nginx_logs"), context)

        assert result.error_code == E_TIMEOUT
        assert "timed out" in result.output


class TestLifecycleTools:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("tool", "expected"),
        [
            (StartTool(), ["docker", "compose", "up", "-d", "nginx"]),
            (StopTool(), ["docker", "compose", "stop", "nginx"]),
            (RestartTool(), ["docker", "compose", "restart", "nginx"]),
        ],
    )
    async def test_compose_arguments(self, context, executor, tool, expected):
        result = await tool.execute(ToolCall(name=tool.get_name()), context)

        executor.execute.assert_awaited_once_with(expected)
        assert result.success is True

    def test_safety_flags(self):
        assert StartTool().get_definition().safety == {"read_only": False, "destructive": False}
        assert StopTool().get_definition().safety == {"read_only": False, "destructive": True}
        assert RestartTool().get_definition().safety["destructive"] is True

    @pytest.mark.asyncio
    async def test_fallback_provenance_in_report(self, context, executor, make_result):
        executor.execute.return_value = make_result(
            fallback_used=True, prior_errors=("spawn EPERM",)
        )

        result = await RestartTool().execute(ToolCall(name="nginx_restart"), context)

        assert "(fallback used)" in result.output
        assert "attempt 1 failed: spawn EPERM" in result.output
