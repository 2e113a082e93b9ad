"""Factory for the tool context and registry.

Central wiring used by the MCP server and the CLI: one ServerConfig and
logger in, one ToolRegistry out.
"""

import httpx

from nginxtools.core.config import ServerConfig
from nginxtools.core.http_client import ProxyHttpClient
from nginxtools.core.logger import NginxToolsLogger
from nginxtools.core.robust_executor import RobustExecutor
from nginxtools.tools import (
    BaseTool,
    CertificateInfoTool,
    ConfigTestTool,
    ConnectivityTestTool,
    ContainerStatusTool,
    GetConfigTool,
    ListCertificatesTool,
    LogsTool,
    ReloadTool,
    RestartTool,
    ServerInfoTool,
    SimpleStatusTool,
    SslConfigTemplateTool,
    StartTool,
    StopTool,
    ToolContext,
    ToolRegistry,
    VersionTool,
)


def create_context(
    config: ServerConfig,
    logger: NginxToolsLogger,
    executor: RobustExecutor | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> ToolContext:
    """Build the collaborators shared by all tools.

    Args:
        config: Server settings
        logger: Structured logger
        executor: Command executor (default: RobustExecutor with all strategies)
        http_transport: Optional httpx transport for the proxy client

    Returns:
        ToolContext
    """
    return ToolContext(
        config=config,
        logger=logger,
        executor=executor or RobustExecutor(config, logger),
        http=ProxyHttpClient(
            config.base_url,
            timeout_s=config.http_timeout_s,
            transport=http_transport,
        ),
    )


def create_tools() -> list[BaseTool]:
    """Instantiate every tool, in catalog order."""
    tools: list[BaseTool] = [
        ConnectivityTestTool(),
        SimpleStatusTool(),
        GetConfigTool(),
        ContainerStatusTool(),
        LogsTool(),
        ConfigTestTool(),
        ReloadTool(),
        VersionTool(),
        StartTool(),
        StopTool(),
        RestartTool(),
        ListCertificatesTool(),
        CertificateInfoTool(),
        SslConfigTemplateTool(),
    ]
    tools.append(ServerInfoTool(catalog=[tool.get_definition() for tool in tools]))
    return tools


def create_tool_registry(context: ToolContext) -> ToolRegistry:
    """Create a registry holding every tool."""
    registry = ToolRegistry(context)
    for tool in create_tools():
        registry.register(tool)
    context.logger.debug("Tool registry created", tool_count=len(registry.list_tools()))
    return registry
