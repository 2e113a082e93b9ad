"""Shared fixtures for tool tests."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from nginxtools.core.command_executor import CascadeResult, ExecutionStrategy, build_outcome
from nginxtools.core.config import ServerConfig
from nginxtools.core.http_client import ProxyHttpClient
from nginxtools.core.logger import NginxToolsLogger
from nginxtools.core.robust_executor import ALL_FAILED_MESSAGE, RobustExecutor
from nginxtools.tools.base import ToolContext


def cascade_result(exit_code=0, stdout="", stderr="", timed_out=False, **kwargs) -> CascadeResult:
    outcome = build_outcome(
        ExecutionStrategy.STREAMING,
        exit_code=exit_code,
        stdout=stdout,
        stderr=stderr,
        timed_out=timed_out,
    )
    return CascadeResult.from_outcome(outcome, **kwargs)


def exhausted_result(last_error="docker: not found", reported_exit_code=None) -> CascadeResult:
    outcome = build_outcome(
        ExecutionStrategy.SYNCHRONOUS,
        exit_code=1,
        stderr=f"{ALL_FAILED_MESSAGE} Last error: {last_error}",
        error_message=ALL_FAILED_MESSAGE,
    )
    return CascadeResult.from_outcome(outcome, reported_exit_code=reported_exit_code)


def refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connect ECONNREFUSED 127.0.0.1:8080", request=request)


@pytest.fixture
def config(tmp_path):
    return ServerConfig(project_dir=str(tmp_path), nginx_port=8080)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=NginxToolsLogger)


@pytest.fixture
def executor():
    mock = AsyncMock(spec=RobustExecutor)
    mock.execute.return_value = cascade_result(stdout="ok\n")
    return mock


@pytest.fixture
def make_context(config, mock_logger, executor):
    """Build a ToolContext whose HTTP client answers through handler."""

    def factory(handler=refused) -> ToolContext:
        http = ProxyHttpClient(
            config.base_url, timeout_s=1.0, transport=httpx.MockTransport(handler)
        )
        return ToolContext(config=config, logger=mock_logger, executor=executor, http=http)

    return factory


@pytest.fixture
def context(make_context):
    return make_context()


@pytest.fixture
def make_result():
    return cascade_result


@pytest.fixture
def exhausted():
    return exhausted_result()


@pytest.fixture
def make_exhausted():
    return exhausted_result
