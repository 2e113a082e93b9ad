"""Container lifecycle and log tools driven through `docker compose`."""

from nginxtools.core.exceptions import E_VALIDATION
from nginxtools.core.tool_protocol import ToolCall, ToolDefinition, ToolResult
from nginxtools.tools.base import BaseTool, ToolContext
from nginxtools.tools.report import render_command_result

MAX_LOG_LINES = 1000
DEFAULT_LOG_LINES = 50


def _compose_hints(context: ToolContext) -> list[str]:
    return [
        f"Check that Docker is installed and '{context.config.docker_binary}' is on PATH",
        f"Verify docker-compose.yml exists in {context.config.project_dir}",
        f"Confirm the compose service is named '{context.config.service_name}'",
    ]


class ContainerStatusTool(BaseTool):
    """Show the compose status of the proxy container."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        argv = context.compose("ps", context.config.service_name)
        result = await context.executor.execute(argv)
        return render_command_result(
            "NGINX container status", argv, result, hints=_compose_hints(context)
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_container_status",
            description="Show Docker Compose status of the NGINX container",
        )


class LogsTool(BaseTool):
    """Fetch the last N lines of the proxy container's logs."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        lines = call.arguments.get("lines", DEFAULT_LOG_LINES)

        # bool is an int subclass
        if isinstance(lines, bool) or not isinstance(lines, int):
            return ToolResult(
                success=False,
                error="lines must be an integer",
                error_code=E_VALIDATION,
            )
        if not 1 <= lines <= MAX_LOG_LINES:
            return ToolResult(
                success=False,
                error=f"lines must be between 1 and {MAX_LOG_LINES}",
                error_code=E_VALIDATION,
            )

        argv = context.compose("logs", "--tail", str(lines), context.config.service_name)
        result = await context.executor.execute(argv)
        return render_command_result(
            f"NGINX logs (last {lines} lines)", argv, result, hints=_compose_hints(context)
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_logs",
            description="Get recent NGINX container logs",
            parameters={
                "type": "object",
                "properties": {
                    "lines": {
                        "type": "integer",
                        "description": f"Number of log lines to return (1-{MAX_LOG_LINES})",
                        "default": DEFAULT_LOG_LINES,
                    }
                },
            },
        )


class _LifecycleTool(BaseTool):
    """Shared execute() for start/stop/restart."""

    name = ""
    description = ""
    verb = ""

    def compose_args(self, context: ToolContext) -> list[str]:
        raise NotImplementedError

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        argv = context.compose(*self.compose_args(context))
        context.logger.info("Lifecycle command", tool_name=self.name, command=" ".join(argv))
        result = await context.executor.execute(argv)
        return render_command_result(
            f"NGINX {self.verb}", argv, result, hints=_compose_hints(context)
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            safety={"read_only": False, "destructive": self.verb != "start"},
        )


class StartTool(_LifecycleTool):
    name = "nginx_start"
    description = "Start the NGINX container (docker compose up -d)"
    verb = "start"

    def compose_args(self, context: ToolContext) -> list[str]:
        return ["up", "-d", context.config.service_name]


class StopTool(_LifecycleTool):
    name = "nginx_stop"
    description = "Stop the NGINX container"
    verb = "stop"

    def compose_args(self, context: ToolContext) -> list[str]:
        return ["stop", context.config.service_name]


class RestartTool(_LifecycleTool):
    name = "nginx_restart"
    description = "Restart the NGINX container"
    verb = "restart"

    def compose_args(self, context: ToolContext) -> list[str]:
        return ["restart", context.config.service_name]
