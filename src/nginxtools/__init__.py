"""
NGINX Tools

An MCP server that lets an AI assistant inspect and control an NGINX
reverse proxy running under Docker Compose: status, logs, configuration,
lifecycle and TLS certificates.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from nginxtools.core.command_executor import (  # noqa: E402
    CascadeResult,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionStrategy,
)
from nginxtools.core.config import ServerConfig, load_config  # noqa: E402
from nginxtools.core.exceptions import (  # noqa: E402
    ConfigurationError,
    NginxToolsException,
    ProxyRequestError,
    ToolExecutionError,
)
from nginxtools.core.robust_executor import RobustExecutor  # noqa: E402

__all__ = [
    "__version__",
    # Engine
    "RobustExecutor",
    "CascadeResult",
    "ExecutionOutcome",
    "ExecutionRequest",
    "ExecutionStrategy",
    # Config
    "ServerConfig",
    "load_config",
    # Exceptions
    "NginxToolsException",
    "ConfigurationError",
    "ProxyRequestError",
    "ToolExecutionError",
]
