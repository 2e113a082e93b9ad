"""Tools that run the nginx binary inside the proxy container."""

from nginxtools.core.tool_protocol import ToolCall, ToolDefinition, ToolResult
from nginxtools.tools.base import BaseTool, ToolContext
from nginxtools.tools.report import render_command_result


def nginx_argv(context: ToolContext, *args: str) -> list[str]:
    """`docker compose exec -T <service> nginx ...` without a TTY."""
    return context.compose("exec", "-T", context.config.service_name, "nginx", *args)


class ConfigTestTool(BaseTool):
    """Validate the configuration with `nginx -t`."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        argv = nginx_argv(context, "-t")
        result = await context.executor.execute(argv)
        return render_command_result(
            "NGINX configuration test",
            argv,
            result,
            hints=[
                "Fix the reported line in nginx.conf and run the test again",
                "Make sure the NGINX container is running (nginx_container_status)",
            ],
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_test_config",
            description="Test NGINX configuration syntax (nginx -t)",
        )


class ReloadTool(BaseTool):
    """Reload the configuration, but only after `nginx -t` passes."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        test_argv = nginx_argv(context, "-t")
        test_result = await context.executor.execute(test_argv)
        if not test_result.succeeded:
            context.logger.warn("Reload skipped, configuration test failed")
            report = render_command_result(
                "NGINX reload aborted: configuration test failed",
                test_argv,
                test_result,
                hints=["Fix the configuration errors above; the running config was not changed"],
            )
            return report

        argv = nginx_argv(context, "-s", "reload")
        result = await context.executor.execute(argv)
        return render_command_result(
            "NGINX configuration reloaded",
            argv,
            result,
            hints=["Check nginx_logs for the reload error"],
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_reload",
            description="Test and reload NGINX configuration without restarting the container",
            safety={"read_only": False, "destructive": False},
        )


class VersionTool(BaseTool):
    """Report the nginx version and build flags."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        argv = nginx_argv(context, "-v")
        result = await context.executor.execute(argv)
        return render_command_result("NGINX version", argv, result)

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_version",
            description="Show the NGINX version running in the container",
        )
