"""Tools exposed to the assistant."""

from nginxtools.tools.base import BaseTool, ToolContext, ToolRegistry
from nginxtools.tools.compose import (
    ContainerStatusTool,
    LogsTool,
    RestartTool,
    StartTool,
    StopTool,
)
from nginxtools.tools.nginx_config import ConfigTestTool, ReloadTool, VersionTool
from nginxtools.tools.status import (
    ConnectivityTestTool,
    GetConfigTool,
    ServerInfoTool,
    SimpleStatusTool,
)
from nginxtools.tools.tls import CertificateInfoTool, ListCertificatesTool, SslConfigTemplateTool

__all__ = [
    "BaseTool",
    "CertificateInfoTool",
    "ConfigTestTool",
    "ConnectivityTestTool",
    "ContainerStatusTool",
    "GetConfigTool",
    "ListCertificatesTool",
    "LogsTool",
    "ReloadTool",
    "RestartTool",
    "ServerInfoTool",
    "SimpleStatusTool",
    "SslConfigTemplateTool",
    "StartTool",
    "StopTool",
    "ToolContext",
    "ToolRegistry",
    "VersionTool",
]
