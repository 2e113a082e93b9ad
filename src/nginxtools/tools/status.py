"""Tools that poll the proxy's HTTP endpoints or describe the server."""

from collections.abc import Sequence
from pathlib import Path

from nginxtools.core.exceptions import E_UNAVAILABLE, ProxyRequestError
from nginxtools.core.tool_protocol import ToolCall, ToolDefinition, ToolResult
from nginxtools.tools.base import BaseTool, ToolContext
from nginxtools.tools.report import timestamp

STATUS_PATH = "/status"
CONFIG_PATH = "/nginx_conf"


class ConnectivityTestTool(BaseTool):
    """Check that the status endpoint answers."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        try:
            response = await context.http.get(STATUS_PATH)
        except ProxyRequestError as e:
            context.logger.warn("Connectivity test failed", url=e.url, error=e.message)
            text = (
                "❌ NGINX connectivity test failed!\n\n"
                f"⚠️ Error: {e.message}\n\n"
                "💡 Suggestions:\n"
                f"- Start NGINX: {context.config.docker_binary} compose up "
                f"{context.config.service_name} -d\n"
                f"- Check if NGINX is running on port {context.config.nginx_port}\n"
                "- Verify Docker network connectivity"
            )
            return ToolResult(success=False, output=text, error=text, error_code=e.error_code)

        return ToolResult(
            success=True,
            output=(
                "✅ NGINX connectivity test successful!\n\n"
                f"📊 Status: HTTP {response.status_code}\n"
                f"📝 Response:\n{response.text}\n\n"
                f"🕐 Timestamp: {timestamp()}"
            ),
            data={"status_code": response.status_code},
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_connectivity_test",
            description="Test connectivity to NGINX server and get status with timestamps",
        )


class SimpleStatusTool(BaseTool):
    """Return the raw status endpoint body."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        try:
            response = await context.http.get(STATUS_PATH)
        except ProxyRequestError as e:
            text = f"Cannot connect to NGINX: {e.message}"
            return ToolResult(success=False, output=text, error=text, error_code=e.error_code)

        return ToolResult(success=True, output=f"NGINX Status Response:\n{response.text}")

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_simple_status",
            description="Get raw NGINX server status metrics and connection data",
        )


class GetConfigTool(BaseTool):
    """Read the live configuration from the proxy's config endpoint.

    No local-file fallback here; the nginx://config resource has one.
    """

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        url = context.http.url_for(CONFIG_PATH)
        try:
            response = await context.http.get(CONFIG_PATH)
        except ProxyRequestError as e:
            docker = context.config.docker_binary
            service = context.config.service_name
            text = (
                "❌ Unable to retrieve real NGINX configuration\n\n"
                f"⚠️ Error: {e.message}\n\n"
                "This tool only reads the configuration of the running NGINX server "
                "through its web endpoint.\n\n"
                "💡 Troubleshooting:\n"
                f"- Ensure NGINX container is running: {docker} compose ps\n"
                f"- Check NGINX service status: {docker} compose logs {service}\n"
                f"- Verify web endpoint: curl {url}\n"
                f"- Confirm container port mapping: {docker} compose port {service} "
                f"{context.config.nginx_port}\n\n"
                "🔧 To fix:\n"
                f"1. Start NGINX: {docker} compose up {service} -d\n"
                "2. Wait for container to be healthy\n"
                "3. Try this tool again"
            )
            return ToolResult(success=False, output=text, error=text, error_code=e.error_code)

        return ToolResult(
            success=True,
            output=(
                "📄 NGINX Configuration (from server):\n"
                f"🌐 Source: {url}\n\n"
                f"```nginx\n{response.text}\n```"
            ),
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_get_config",
            description="Read and display the complete NGINX configuration file content",
        )


class ServerInfoTool(BaseTool):
    """Describe the server setup and the available tools. No I/O."""

    def __init__(self, catalog: Sequence[ToolDefinition] = ()) -> None:
        self.catalog = list(catalog)

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        config = context.config
        docker = config.docker_binary
        service = config.service_name

        tool_lines = [f"- {d.name}: {d.description}" for d in self.catalog]
        tool_lines.append(f"- {self.get_name()}: This server information")

        text = (
            "📋 NGINX Server Information:\n\n"
            f"🌐 Service URL: {config.base_url}\n"
            f"📂 Status Endpoint: {STATUS_PATH}\n"
            f"📄 Config Endpoint: {CONFIG_PATH}\n"
            f"🐳 Container: {service} (Docker Compose)\n"
            f"⚡ Port: {config.nginx_port}\n"
            f"📁 Project Directory: {config.project_dir}\n"
            f"⏱️ Command Timeout: {config.command_timeout_ms}ms\n\n"
            "🛠️ Available MCP Tools:\n" + "\n".join(tool_lines) + "\n\n"
            "📚 Available Resources:\n"
            "- nginx://config: Configuration file content\n\n"
            "🚀 Quick Commands:\n"
            f"- Start: {docker} compose up {service} -d\n"
            f"- Stop: {docker} compose down\n"
            f"- Logs: {docker} compose logs {service}\n"
            f"- Status: {docker} compose ps\n\n"
            "💡 Note: This shows server setup info, not live metrics. "
            "Use nginx_simple_status for current connection data."
        )
        return ToolResult(success=True, output=text)

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_server_info",
            description=(
                "Get NGINX server configuration details, environment info, "
                "and available operations"
            ),
        )


async def read_config_resource(context: ToolContext) -> str:
    """Content of the nginx://config resource.

    Tries the live config endpoint, then <project_dir>/nginx.conf, then
    returns a text describing both failures.
    """
    try:
        response = await context.http.get(CONFIG_PATH)
        return response.text
    except ProxyRequestError as api_error:
        context.logger.info(
            "Config endpoint unavailable, reading local file", error=api_error.message
        )
        config_path = Path(context.config.project_dir) / "nginx.conf"
        try:
            return config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as file_error:
            context.logger.warn(
                "Cannot access NGINX configuration",
                error_code=E_UNAVAILABLE,
                api_error=api_error.message,
                file_error=str(file_error),
            )
            return (
                "❌ Cannot access NGINX configuration\n\n"
                f"API Error: {api_error.message}\n"
                f"File Error: {file_error}\n\n"
                "💡 Suggestions:\n"
                "- Ensure NGINX container is running\n"
                "- Check if nginx.conf exists in project directory\n"
                "- Verify NGINX config endpoint is available"
            )
