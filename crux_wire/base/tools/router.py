"""Name-keyed tool registry used when executing model tool calls.

The router resolves a tool call's function name to a :class:`Tool` and wraps
every outcome, including an unknown name, in a ``ToolResultDTO``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Optional

from ..dto.tool_result import ToolResultDTO
from .tool import Tool


class SimpleToolRouter:
    """A minimal registry-based tool router.

    Contract:
        - Register tools with ``register(tool)``; a later tool with the same
          name replaces the earlier one.
        - Invoke via ``invoke(name, arguments)`` and receive ``ToolResultDTO``.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: Dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def invoke(self, name: str, arguments: Any) -> ToolResultDTO:
        """Invoke the tool registered under ``name``.

        Args:
            name: Tool name requested by the model.
            arguments: Parsed arguments (normally a dict).

        Returns:
            ToolResultDTO: Standardized result envelope.
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResultDTO(name=name, ok=False, code="not_found", error=f"tool '{name}' not found")
        return tool.execute(arguments)


__all__ = ["SimpleToolRouter"]
