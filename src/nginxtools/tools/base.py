"""Base tool framework and registry.

Defines the abstract interface for all tools and the registry that
dispatches named calls to them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from nginxtools.core.config import ServerConfig
from nginxtools.core.exceptions import E_TOOL_UNKNOWN, ToolExecutionError
from nginxtools.core.http_client import ProxyHttpClient
from nginxtools.core.logger import NginxToolsLogger
from nginxtools.core.robust_executor import RobustExecutor
from nginxtools.core.tool_protocol import ToolCall, ToolDefinition, ToolResult, validate_tool_schema


@dataclass
class ToolContext:
    """Collaborators provided to tools during execution."""

    config: ServerConfig
    logger: NginxToolsLogger
    executor: RobustExecutor
    http: ProxyHttpClient

    def compose(self, *args: str) -> list[str]:
        """Build a `docker compose` argument vector."""
        return [self.config.docker_binary, "compose", *args]


class BaseTool(ABC):
    """Abstract base class for all tools.

    To create a new tool:
    1. Subclass BaseTool
    2. Implement execute() method
    3. Implement get_definition() to return ToolDefinition
    4. Register with ToolRegistry
    """

    @abstractmethod
    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        """Execute the tool with given arguments.

        Args:
            call: Tool call with name and arguments
            context: Execution context (config, logger, executor, http client)

        Returns:
            ToolResult whose text is shown to the assistant
        """
        raise NotImplementedError

    @abstractmethod
    def get_definition(self) -> ToolDefinition:
        """Get the tool's definition.

        Returns:
            ToolDefinition with name, description, and JSON Schema
        """
        raise NotImplementedError

    def get_name(self) -> str:
        return self.get_definition().name

    def get_description(self) -> str:
        return self.get_definition().description


class ToolRegistry:
    """Registry for managing and executing tools."""

    def __init__(self, context: ToolContext) -> None:
        """Initialize tool registry.

        Args:
            context: Tool execution context
        """
        self.context = context
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register

        Raises:
            ValueError: If the name is taken or the schema is malformed
        """
        definition = tool.get_definition()
        name = definition.name
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        if not validate_tool_schema(definition):
            raise ValueError(f"Invalid parameter schema for tool: {name}")

        self._tools[name] = tool
        self.context.logger.debug("Tool registered", tool_name=name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    async def execute(self, call: ToolCall) -> ToolResult:
        """Execute a tool call.

        Args:
            call: Tool call to execute

        Returns:
            ToolResult from tool execution

        Raises:
            ToolExecutionError: If the tool raised instead of returning a result
        """
        if not self.has(call.name):
            self.context.logger.warn("Unknown tool requested", tool_name=call.name)
            return ToolResult(
                success=False,
                error=f"Unknown tool: {call.name}",
                error_code=E_TOOL_UNKNOWN,
            )

        tool = self._tools[call.name]

        try:
            with self.context.logger.tool_call(call.name) as record:
                result = await tool.execute(call, self.context)
                record["success"] = result.success
                record["error_code"] = result.error_code
            return result
        except Exception as e:
            self.context.logger.error(
                "Tool execution failed",
                tool_name=call.name,
                error=str(e),
            )
            raise ToolExecutionError(
                message=f"Tool {call.name} failed: {e}",
                tool_name=call.name,
                details=type(e).__name__,
            ) from e

    def get_definitions(self) -> list[ToolDefinition]:
        return [tool.get_definition() for tool in self._tools.values()]

    def list_tools(self) -> list[str]:
        return list(self._tools.keys())
