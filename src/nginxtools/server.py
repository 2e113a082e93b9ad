"""MCP server exposing the NGINX tools and the nginx://config resource.

Handlers are plain async methods on NginxToolsServer so they can be
exercised without a transport; build_server() wires them onto the MCP
low-level Server and run_stdio() serves them over stdin/stdout.
"""

import asyncio
from typing import Any

import mcp.types as types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from nginxtools import __version__
from nginxtools.core.config import ServerConfig
from nginxtools.core.exceptions import (
    ToolExecutionError,
    format_error_for_log,
    format_error_for_user,
)
from nginxtools.core.factory import create_context, create_tool_registry
from nginxtools.core.logger import NginxToolsLogger
from nginxtools.core.tool_protocol import ToolCall
from nginxtools.tools.base import ToolContext, ToolRegistry
from nginxtools.tools.status import read_config_resource

SERVER_NAME = "NGINX Tools"
CONFIG_RESOURCE_URI = "nginx://config"


class NginxToolsServer:
    """Transport-independent request handlers."""

    def __init__(self, context: ToolContext, registry: ToolRegistry | None = None) -> None:
        self.context = context
        self.registry = registry or create_tool_registry(context)

    async def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.parameters,
                annotations=types.ToolAnnotations(
                    readOnlyHint=definition.safety["read_only"],
                    destructiveHint=definition.safety["destructive"],
                ),
            )
            for definition in self.registry.get_definitions()
        ]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        """Dispatch a tool call; always answers with text."""
        call = ToolCall(name=name, arguments=arguments or {})
        try:
            result = await self.registry.execute(call)
        except ToolExecutionError as e:
            self.context.logger.error("Tool call crashed", **format_error_for_log(e))
            text = f"❌ {format_error_for_user(e)}"
        else:
            text = result.text or ("✅ Done" if result.success else "❌ Failed with no output")
            if not result.success and result.error_code and not result.output:
                text = f"❌ {text} ({result.error_code})"
        return [types.TextContent(type="text", text=text)]

    async def list_resources(self) -> list[types.Resource]:
        return [
            types.Resource(
                uri=CONFIG_RESOURCE_URI,
                name="nginx-config",
                description="NGINX server configuration file",
                mimeType="text/plain",
            )
        ]

    async def read_resource(self, uri: str) -> str:
        if str(uri) != CONFIG_RESOURCE_URI:
            raise ValueError(f"Unknown resource: {uri}")
        return await read_config_resource(self.context)


def build_server(handlers: NginxToolsServer) -> Server:
    """Register handlers on an MCP low-level Server."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return await handlers.list_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await handlers.call_tool(name, arguments)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return await handlers.list_resources()

    @server.read_resource()
    async def read_resource(uri: Any) -> list[ReadResourceContents]:
        text = await handlers.read_resource(str(uri))
        return [ReadResourceContents(content=text, mime_type="text/plain")]

    return server


def create_server(config: ServerConfig, logger: NginxToolsLogger) -> Server:
    """Build a ready-to-run MCP server for config."""
    context = create_context(config, logger)
    return build_server(NginxToolsServer(context))


async def serve_stdio(config: ServerConfig, logger: NginxToolsLogger) -> None:
    server = create_server(config, logger)
    logger.info(
        "NGINX Tools MCP server starting",
        base_url=config.base_url,
        project_dir=config.project_dir,
        command_timeout_ms=config.command_timeout_ms,
    )
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_stdio(config: ServerConfig, logger: NginxToolsLogger) -> None:
    """Serve over stdio until the client disconnects."""
    asyncio.run(serve_stdio(config, logger))
