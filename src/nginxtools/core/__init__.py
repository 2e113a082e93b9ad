"""Core modules for NGINX Tools.

Configuration, logging, exceptions, the HTTP client, and the robust
command execution engine with its three strategies.
"""

from .command_executor import (
    TIMEOUT_EXIT_CODE,
    CascadeResult,
    CommandExecutor,
    ExecutionOutcome,
    ExecutionRequest,
    ExecutionStrategy,
    build_outcome,
)
from .config import ServerConfig, load_config
from .exceptions import (
    E_COMMAND_FAILED,
    E_TIMEOUT,
    E_TOOL_UNKNOWN,
    E_UNAVAILABLE,
    E_VALIDATION,
    ConfigurationError,
    NginxToolsException,
    ProxyRequestError,
    ToolExecutionError,
    format_error_for_log,
    format_error_for_user,
)
from .robust_executor import ALL_FAILED_MESSAGE, RobustExecutor

__all__ = [
    # Error codes
    "E_COMMAND_FAILED",
    "E_TIMEOUT",
    "E_TOOL_UNKNOWN",
    "E_UNAVAILABLE",
    "E_VALIDATION",
    # Exception classes
    "ConfigurationError",
    "NginxToolsException",
    "ProxyRequestError",
    "ToolExecutionError",
    "format_error_for_log",
    "format_error_for_user",
    # Execution engine
    "ALL_FAILED_MESSAGE",
    "TIMEOUT_EXIT_CODE",
    "CascadeResult",
    "CommandExecutor",
    "ExecutionOutcome",
    "ExecutionRequest",
    "ExecutionStrategy",
    "RobustExecutor",
    "build_outcome",
    # Config
    "ServerConfig",
    "load_config",
]
