"""Configuration system for NGINX Tools.

Provides configuration loading, merging, and validation with precedence:
1. Environment variables (highest)
2. Project config (<project_dir>/.nginxtools/config.json)
3. Defaults (lowest)

The merged ServerConfig is built once at process start and passed
explicitly to the components that need it.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from nginxtools.core.exceptions import ConfigurationError

DEFAULT_COMMAND_TIMEOUT_MS = 15000


@dataclass(frozen=True)
class ServerConfig:
    """Settings for the NGINX tools server.

    Attributes:
        nginx_host: Host where the proxy's HTTP endpoints are reachable
        nginx_port: Port of the proxy's HTTP endpoints
        project_dir: Docker Compose project directory (commands run here)
        command_timeout_ms: Per-strategy timeout for external commands
        http_timeout_s: Timeout for HTTP polling of status/config endpoints
        service_name: Compose service name of the proxy container
        docker_binary: Binary used to drive Docker Compose
        ssl_dir: Certificate directory inside the container
        extra_env: Variables overlaid on the process environment for commands
    """

    nginx_host: str = "localhost"
    nginx_port: int = 8080
    project_dir: str = field(default_factory=lambda: str(Path.cwd()))
    command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS
    http_timeout_s: float = 5.0
    service_name: str = "nginx"
    docker_binary: str = "docker"
    ssl_dir: str = "/etc/nginx/ssl"
    extra_env: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.nginx_port, int) or not 1 <= self.nginx_port <= 65535:
            raise ConfigurationError(
                f"nginx_port must be between 1 and 65535, got {self.nginx_port}",
                key="nginx_port",
            )
        if not isinstance(self.command_timeout_ms, int) or self.command_timeout_ms < 1:
            raise ConfigurationError(
                f"command_timeout_ms must be a positive integer, got {self.command_timeout_ms}",
                key="command_timeout_ms",
            )
        if self.http_timeout_s <= 0:
            raise ConfigurationError(
                f"http_timeout_s must be > 0, got {self.http_timeout_s}",
                key="http_timeout_s",
            )
        for key in ("nginx_host", "service_name", "docker_binary", "project_dir"):
            if not getattr(self, key):
                raise ConfigurationError(f"{key} must not be empty", key=key)
        if not isinstance(self.extra_env, dict) or not all(
            isinstance(name, str) and isinstance(value, str)
            for name, value in self.extra_env.items()
        ):
            raise ConfigurationError(
                f"extra_env must map variable names to strings, got {self.extra_env!r}",
                key="extra_env",
            )

    @property
    def base_url(self) -> str:
        """Base URL of the proxy's HTTP endpoints."""
        return f"http://{self.nginx_host}:{self.nginx_port}"

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServerConfig":
        """Create config from dictionary, ignoring unknown keys."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def load_project_config(project_root: Path | None = None) -> dict[str, Any] | None:
    """Load project-specific settings from .nginxtools/config.json.

    Args:
        project_root: Directory to search for .nginxtools/config.json
                     (default: current directory)

    Returns:
        Raw settings dictionary if the file exists, None otherwise

    Raises:
        ConfigurationError: If the config file is invalid JSON or not an object
    """
    if project_root is None:
        project_root = Path.cwd()

    config_path = project_root / ".nginxtools" / "config.json"

    if not config_path.exists():
        return None

    try:
        with config_path.open() as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in project config: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load project config: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Project config must be a JSON object")
    return data


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {name}: {value}", key=name) from e


def load_env_overrides() -> dict[str, Any]:
    """Load configuration overrides from environment variables.

    Supported environment variables:
    - NGINX_HOST, NGINX_PORT: proxy HTTP endpoint
    - NGINX_PROJECT_DIR: Docker Compose project directory
    - NGINX_COMMAND_TIMEOUT_MS: per-strategy command timeout
    - NGINX_HTTP_TIMEOUT: HTTP polling timeout in seconds
    - NGINX_SERVICE_NAME, NGINX_DOCKER_BINARY, NGINX_SSL_DIR

    Returns:
        Dictionary of configuration overrides
    """
    overrides: dict[str, Any] = {}

    string_vars = {
        "NGINX_HOST": "nginx_host",
        "NGINX_PROJECT_DIR": "project_dir",
        "NGINX_SERVICE_NAME": "service_name",
        "NGINX_DOCKER_BINARY": "docker_binary",
        "NGINX_SSL_DIR": "ssl_dir",
    }
    for env_name, key in string_vars.items():
        if value := os.getenv(env_name):
            overrides[key] = value

    if (port := _env_int("NGINX_PORT")) is not None:
        overrides["nginx_port"] = port

    if (timeout_ms := _env_int("NGINX_COMMAND_TIMEOUT_MS")) is not None:
        overrides["command_timeout_ms"] = timeout_ms

    if http_timeout_str := os.getenv("NGINX_HTTP_TIMEOUT"):
        try:
            overrides["http_timeout_s"] = float(http_timeout_str)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid NGINX_HTTP_TIMEOUT: {http_timeout_str}", key="NGINX_HTTP_TIMEOUT"
            ) from e

    return overrides


def merge_configs(
    project: dict[str, Any] | None = None,
    env_overrides: dict[str, Any] | None = None,
) -> ServerConfig:
    """Merge configurations with precedence: env > project > defaults.

    Args:
        project: Project-file settings (optional)
        env_overrides: Environment variable overrides (optional)

    Returns:
        Merged configuration
    """
    merged = ServerConfig().to_dict()

    if project:
        for key, value in project.items():
            # extra_env merges rather than replaces
            if key == "extra_env" and isinstance(value, dict):
                merged["extra_env"] = {**merged["extra_env"], **value}
            else:
                merged[key] = value

    if env_overrides:
        merged.update(env_overrides)

    return ServerConfig.from_dict(merged)


def load_config(project_root: Path | None = None) -> ServerConfig:
    """Load and merge all configuration sources.

    The project file is looked up in NGINX_PROJECT_DIR when set, otherwise
    in project_root (default: current directory). When no project_dir is
    configured anywhere, the directory searched becomes the project_dir.

    Args:
        project_root: Project root directory (default: current directory)

    Returns:
        Merged configuration

    Raises:
        ConfigurationError: If any config source is invalid
    """
    env_overrides = load_env_overrides()

    search_root = Path(env_overrides.get("project_dir") or project_root or Path.cwd())
    project_config = load_project_config(search_root)

    if project_config is None:
        project_config = {}
    project_config.setdefault("project_dir", str(search_root))

    return merge_configs(project_config, env_overrides)
