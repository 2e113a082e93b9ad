"""Tool protocol core types and helpers."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCall:
    """A named operation requested by the assistant."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str = ""


@dataclass
class ToolResult:
    """Result from tool execution.

    output holds the text report returned to the assistant; it is set on
    failure too, since every call must be answered with text.
    """

    success: bool
    output: str | None = None
    error: str | None = None
    error_code: str | None = None
    data: dict[str, Any] | None = None

    @property
    def text(self) -> str:
        return self.output or self.error or ""


@dataclass
class ToolDefinition:
    """Tool definition with JSON Schema and behaviour flags."""

    name: str
    description: str
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )  # JSON Schema
    safety: dict[str, bool] = field(default_factory=dict)  # read_only, destructive

    def __post_init__(self) -> None:
        """Validate tool definition structure."""
        if not isinstance(self.parameters, dict):
            raise ValueError("Tool parameters must be a dictionary")
        if "type" not in self.parameters:
            raise ValueError("Tool parameters must specify 'type'")

        safety_defaults = {"read_only": True, "destructive": False}
        for key, default in safety_defaults.items():
            if key not in self.safety:
                self.safety[key] = default


def validate_tool_schema(tool_def: ToolDefinition) -> bool:
    """Validate tool definition JSON Schema.

    Args:
        tool_def: ToolDefinition to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        params = tool_def.parameters

        if not isinstance(params.get("type"), str):
            return False

        if params["type"] == "object":
            if "properties" not in params:
                return False
            if not isinstance(params["properties"], dict):
                return False

            if "required" in params and not isinstance(params["required"], list):
                return False

        if "properties" in params:
            for _prop_name, prop_def in params["properties"].items():
                if not isinstance(prop_def, dict):
                    return False
                if "type" not in prop_def:
                    return False

        return True

    except (KeyError, TypeError, AttributeError):
        return False
