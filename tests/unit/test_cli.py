"""Tests for the click CLI."""

import json
import sys

import click
import pytest
from click.testing import CliRunner

from nginxtools import __version__
from nginxtools.cli.main import _parse_args, cli


@pytest.fixture(autouse=True)
def quiet_env(monkeypatch):
    monkeypatch.setenv("NGINXTOOLS_DISABLE_FILE_LOGGING", "1")
    for name in ("NGINX_PORT", "NGINX_PROJECT_DIR", "NGINX_COMMAND_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


class TestParseArgs:
    def test_json_values(self):
        assert _parse_args(("lines=100", "domain=example.com", "flag=true")) == {
            "lines": 100,
            "domain": "example.com",
            "flag": True,
        }

    def test_value_with_equals(self):
        assert _parse_args(("upstream=a=b",)) == {"upstream": "a=b"}

    def test_missing_equals(self):
        with pytest.raises(click.BadParameter):
            _parse_args(("lines",))


class TestCli:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_bare_invocation_lists_commands(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "nginxtools serve" in result.output
        assert "nginxtools exec" in result.output

    def test_tools_table(self, runner, tmp_path):
        result = runner.invoke(cli, ["tools", "--project-dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "nginx_logs" in result.output

    def test_call_server_info(self, runner, tmp_path):
        result = runner.invoke(cli, ["call", "nginx_server_info", "-d", str(tmp_path)])
        assert result.exit_code == 0
        assert "NGINX Server Information" in result.output

    def test_call_validation_failure(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["call", "nginx_logs", "--arg", "lines=0", "-d", str(tmp_path)]
        )
        assert result.exit_code == 1
        assert "lines must be between 1 and 1000" in result.output

    def test_invalid_config_exits_2(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("NGINX_PORT", "not-a-port")
        result = runner.invoke(cli, ["tools", "-d", str(tmp_path)])
        assert result.exit_code == 2

    def test_exec_success(self, runner, tmp_path):
        result = runner.invoke(cli, ["exec", "-d", str(tmp_path), "echo", "hello"])
        assert result.exit_code == 0
        assert "hello" in result.output
        assert "Execution method: streaming" in result.output

    def test_exec_json(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["exec", "-d", str(tmp_path), "--json", sys.executable, "--version"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["succeeded"] is True
        assert data["method"] == "streaming"
        assert data["stdout"].startswith("Python")

    def test_exec_failure_exit_code(self, runner, tmp_path):
        result = runner.invoke(cli, ["exec", "-d", str(tmp_path), "nonexistent-binary-xyz"])
        assert result.exit_code == 1
        assert "All execution methods failed." in result.output
