"""Tests for configuration system."""

import json
from pathlib import Path

import pytest

from nginxtools.core.config import (
    DEFAULT_COMMAND_TIMEOUT_MS,
    ServerConfig,
    load_config,
    load_env_overrides,
    load_project_config,
    merge_configs,
)
from nginxtools.core.exceptions import ConfigurationError

ENV_VARS = [
    "NGINX_HOST",
    "NGINX_PORT",
    "NGINX_PROJECT_DIR",
    "NGINX_COMMAND_TIMEOUT_MS",
    "NGINX_HTTP_TIMEOUT",
    "NGINX_SERVICE_NAME",
    "NGINX_DOCKER_BINARY",
    "NGINX_SSL_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_project_config(root: Path, data) -> None:
    config_dir = root / ".nginxtools"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps(data))


class TestServerConfig:
    def test_default_config(self):
        config = ServerConfig()
        assert config.nginx_host == "localhost"
        assert config.nginx_port == 8080
        assert config.command_timeout_ms == 15000
        assert config.command_timeout_ms == DEFAULT_COMMAND_TIMEOUT_MS
        assert config.http_timeout_s == 5.0
        assert config.service_name == "nginx"
        assert config.docker_binary == "docker"
        assert config.project_dir == str(Path.cwd())
        assert config.extra_env == {}

    def test_base_url(self):
        config = ServerConfig(nginx_host="proxy", nginx_port=9090)
        assert config.base_url == "http://proxy:9090"

    def test_config_is_frozen(self):
        config = ServerConfig()
        with pytest.raises(AttributeError):
            config.nginx_port = 1  # type: ignore[misc]

    def test_validation_port_range(self):
        with pytest.raises(ConfigurationError, match="nginx_port must be between 1 and 65535"):
            ServerConfig(nginx_port=70000)

    def test_validation_timeout_positive(self):
        with pytest.raises(ConfigurationError, match="command_timeout_ms must be a positive"):
            ServerConfig(command_timeout_ms=0)

    def test_validation_http_timeout(self):
        with pytest.raises(ConfigurationError, match="http_timeout_s must be > 0"):
            ServerConfig(http_timeout_s=0)

    def test_validation_empty_service(self):
        with pytest.raises(ConfigurationError, match="service_name must not be empty") as exc:
            ServerConfig(service_name="")
        assert exc.value.key == "service_name"

    def test_validation_extra_env_values_must_be_strings(self):
        with pytest.raises(ConfigurationError, match="extra_env must map") as exc:
            ServerConfig(extra_env={"COMPOSE_PARALLEL_LIMIT": 4})
        assert exc.value.key == "extra_env"

    def test_validation_extra_env_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match="extra_env must map"):
            ServerConfig(extra_env=["A=1"])  # type: ignore[arg-type]

    def test_from_dict_ignores_unknown_keys(self):
        config = ServerConfig.from_dict({"nginx_port": 81, "unknown_key": "ignored"})
        assert config.nginx_port == 81
        assert not hasattr(config, "unknown_key")

    def test_to_dict(self):
        data = ServerConfig(nginx_port=81).to_dict()
        assert data["nginx_port"] == 81
        assert "command_timeout_ms" in data


class TestLoadProjectConfig:
    def test_missing_file(self, tmp_path):
        assert load_project_config(tmp_path) is None

    def test_loads_file(self, tmp_path):
        write_project_config(tmp_path, {"nginx_port": 9000})
        assert load_project_config(tmp_path) == {"nginx_port": 9000}

    def test_invalid_json(self, tmp_path):
        config_dir = tmp_path / ".nginxtools"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON in project config"):
            load_project_config(tmp_path)

    def test_non_object(self, tmp_path):
        write_project_config(tmp_path, [1, 2])

        with pytest.raises(ConfigurationError, match="must be a JSON object"):
            load_project_config(tmp_path)


class TestEnvOverrides:
    def test_no_overrides(self):
        assert load_env_overrides() == {}

    def test_all_overrides(self, monkeypatch):
        monkeypatch.setenv("NGINX_HOST", "proxy")
        monkeypatch.setenv("NGINX_PORT", "9090")
        monkeypatch.setenv("NGINX_COMMAND_TIMEOUT_MS", "30000")
        monkeypatch.setenv("NGINX_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("NGINX_SERVICE_NAME", "proxy")
        monkeypatch.setenv("NGINX_DOCKER_BINARY", "podman")
        monkeypatch.setenv("NGINX_SSL_DIR", "/certs")

        overrides = load_env_overrides()

        assert overrides == {
            "nginx_host": "proxy",
            "nginx_port": 9090,
            "command_timeout_ms": 30000,
            "http_timeout_s": 2.5,
            "service_name": "proxy",
            "docker_binary": "podman",
            "ssl_dir": "/certs",
        }

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv("NGINX_PORT", "eighty")
        with pytest.raises(ConfigurationError, match="Invalid NGINX_PORT"):
            load_env_overrides()

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("NGINX_COMMAND_TIMEOUT_MS", "soon")
        with pytest.raises(ConfigurationError, match="Invalid NGINX_COMMAND_TIMEOUT_MS"):
            load_env_overrides()

    def test_invalid_http_timeout(self, monkeypatch):
        monkeypatch.setenv("NGINX_HTTP_TIMEOUT", "later")
        with pytest.raises(ConfigurationError, match="Invalid NGINX_HTTP_TIMEOUT"):
            load_env_overrides()


class TestMergeAndLoad:
    def test_merge_precedence(self):
        config = merge_configs(
            {"nginx_port": 9000, "nginx_host": "from-file"},
            {"nginx_port": 9100},
        )
        assert config.nginx_port == 9100
        assert config.nginx_host == "from-file"

    def test_merge_extra_env(self):
        config = merge_configs({"extra_env": {"A": "1"}})
        assert config.extra_env == {"A": "1"}

    def test_merge_validates(self):
        with pytest.raises(ConfigurationError):
            merge_configs({"command_timeout_ms": -5})

    def test_merge_rejects_non_string_extra_env(self):
        with pytest.raises(ConfigurationError) as exc:
            merge_configs({"extra_env": {"COMPOSE_PARALLEL_LIMIT": 4}})
        assert exc.value.key == "extra_env"

    def test_load_config_defaults_project_dir(self, tmp_path):
        config = load_config(project_root=tmp_path)
        assert config.project_dir == str(tmp_path)
        assert config.command_timeout_ms == 15000

    def test_load_config_reads_project_file(self, tmp_path):
        write_project_config(tmp_path, {"nginx_port": 8443, "command_timeout_ms": 20000})

        config = load_config(project_root=tmp_path)

        assert config.nginx_port == 8443
        assert config.command_timeout_ms == 20000

    def test_env_beats_project_file(self, tmp_path, monkeypatch):
        write_project_config(tmp_path, {"nginx_port": 8443})
        monkeypatch.setenv("NGINX_PORT", "8888")

        config = load_config(project_root=tmp_path)

        assert config.nginx_port == 8888

    def test_project_dir_from_env(self, tmp_path, monkeypatch):
        write_project_config(tmp_path, {"service_name": "edge"})
        monkeypatch.setenv("NGINX_PROJECT_DIR", str(tmp_path))

        config = load_config()

        assert config.project_dir == str(tmp_path)
        assert config.service_name == "edge"
