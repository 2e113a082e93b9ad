"""Exception hierarchy with error codes for NGINX Tools.

Errors raised outside the command execution engine (configuration, HTTP
polling, tool dispatch) carry an error code and metadata so they can be
reported consistently to the assistant and to the structured log.
"""

from dataclasses import dataclass, field
from typing import Any

# Standard error codes shared with the tool protocol
E_COMMAND_FAILED = "E_COMMAND_FAILED"
E_VALIDATION = "E_VALIDATION"
E_TIMEOUT = "E_TIMEOUT"
E_UNAVAILABLE = "E_UNAVAILABLE"
E_TOOL_UNKNOWN = "E_TOOL_UNKNOWN"


@dataclass
class NginxToolsException(Exception):  # noqa: N818
    """Base exception for all NGINX Tools errors.

    Provides structured error handling with error codes and metadata for
    consistent error reporting across the server.
    """

    message: str
    error_code: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)


@dataclass
class ToolExecutionError(NginxToolsException):
    """A tool handler failed unexpectedly."""

    tool_name: str = ""
    details: str | None = None

    def __post_init__(self) -> None:
        """Initialize with tool-specific metadata."""
        if self.tool_name:
            self.metadata["tool_name"] = self.tool_name
        if self.details:
            self.metadata["details"] = self.details
        super().__post_init__()


@dataclass
class ConfigurationError(NginxToolsException):
    """Error in server configuration.

    Raised for invalid config values, bad environment overrides,
    or unreadable project config files.
    """

    key: str = ""
    reason: str = ""

    def __post_init__(self) -> None:
        """Initialize with configuration-specific metadata."""
        if not self.error_code:
            self.error_code = E_VALIDATION
        if self.key:
            self.metadata["config_key"] = self.key
        if self.reason:
            self.metadata["reason"] = self.reason
        super().__post_init__()


@dataclass
class ProxyRequestError(NginxToolsException):
    """Error polling one of the proxy's HTTP endpoints.

    Raised for connection failures, timeouts, and non-2xx responses.
    """

    url: str = ""
    status_code: int | None = None

    def __post_init__(self) -> None:
        """Initialize with request-specific metadata."""
        if not self.error_code:
            self.error_code = E_UNAVAILABLE
        if self.url:
            self.metadata["url"] = self.url
        if self.status_code is not None:
            self.metadata["status_code"] = self.status_code
        super().__post_init__()


def format_error_for_user(exception: NginxToolsException) -> str:
    """Format exception for user-friendly display.

    Args:
        exception: The exception to format

    Returns:
        Human-readable error message without internal details
    """
    if isinstance(exception, ToolExecutionError):
        if exception.tool_name:
            return f"Tool '{exception.tool_name}' failed: {exception.message}"
        return f"Tool execution failed: {exception.message}"

    if isinstance(exception, ConfigurationError):
        if exception.key:
            return f"Configuration error '{exception.key}': {exception.message}"
        return f"Configuration error: {exception.message}"

    if isinstance(exception, ProxyRequestError):
        if exception.status_code is not None:
            return f"NGINX returned HTTP {exception.status_code}: {exception.message}"
        return f"NGINX request failed: {exception.message}"

    return str(exception.message)


def format_error_for_log(exception: NginxToolsException) -> dict[str, Any]:
    """Format exception for structured logging.

    Args:
        exception: The exception to format

    Returns:
        Dictionary with structured error information for logs
    """
    log_data: dict[str, Any] = {
        "error_type": type(exception).__name__,
        "message": exception.message,
        "error_code": exception.error_code,
    }

    if exception.metadata:
        log_data["metadata"] = exception.metadata

    if isinstance(exception, ToolExecutionError):
        if exception.tool_name:
            log_data["tool_name"] = exception.tool_name
        if exception.details:
            log_data["details"] = exception.details

    elif isinstance(exception, ConfigurationError):
        if exception.key:
            log_data["config_key"] = exception.key
        if exception.reason:
            log_data["reason"] = exception.reason

    elif isinstance(exception, ProxyRequestError):
        if exception.url:
            log_data["url"] = exception.url
        if exception.status_code is not None:
            log_data["status_code"] = exception.status_code

    return log_data
