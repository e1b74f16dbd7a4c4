"""Tool definition, routing, streamed-call accumulation and execution."""

from .tool import Tool, ToolCallback, valid_tool_name
from .router import SimpleToolRouter
from .accumulator import ToolCallAccumulator
from .executor import ToolSet, execute_and_append_tools

__all__ = [
    "Tool",
    "ToolCallback",
    "valid_tool_name",
    "SimpleToolRouter",
    "ToolCallAccumulator",
    "ToolSet",
    "execute_and_append_tools",
]
