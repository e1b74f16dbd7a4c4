"""Execute model tool calls and append their results to a context.

Calls run sequentially in the order the model produced them. Every outcome,
including an unknown tool or malformed arguments, becomes a tool-role message;
nothing here raises for a failing tool.
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..dto.tool_result import ToolResultDTO
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import Context, ToolCall
from .router import SimpleToolRouter
from .tool import Tool

_logger = get_logger("crux_wire.tools")

ToolSet = Union[SimpleToolRouter, Iterable[Tool]]


def _as_tool_call(call: Union[ToolCall, Mapping[str, Any]]) -> ToolCall:
    if isinstance(call, ToolCall):
        return call
    function = call.get("function") if isinstance(call.get("function"), Mapping) else {}
    name = call.get("name") or function.get("name") or ""
    arguments = call.get("arguments", function.get("arguments", ""))
    return ToolCall.new(call.get("id"), name, arguments)


def _run_one(router: SimpleToolRouter, call: ToolCall) -> ToolResultDTO:
    args = call.args_map()
    if args is None:
        return ToolResultDTO(
            name=call.name,
            ok=False,
            code="invalid_input",
            error=f"could not parse arguments for tool '{call.name}' as a JSON object",
        )
    return router.invoke(call.name, args)


def execute_and_append_tools(
    context: Context,
    tool_calls: Sequence[Union[ToolCall, Mapping[str, Any]]],
    tools: ToolSet,
    *,
    log_ctx: Optional[LogContext] = None,
) -> Context:
    """Run each tool call and return ``context`` extended with one tool message per call.

    Args:
        context: Conversation that already ends with the assistant message
            requesting ``tool_calls``.
        tool_calls: ToolCall objects or mappings with id/name/arguments (or
            the ``function`` sub-mapping used on the wire).
        tools: A router or an iterable of :class:`Tool`.
        log_ctx: Optional log context for ``tools.execute`` events.

    Returns:
        Context: New context; the input is not modified.
    """
    router = tools if isinstance(tools, SimpleToolRouter) else SimpleToolRouter(tools)
    result = context
    for raw in tool_calls:
        call = _as_tool_call(raw)
        started = time.perf_counter()
        outcome = _run_one(router, call)
        normalized_log_event(
            _logger,
            "tools.execute",
            log_ctx,
            phase="tools",
            error_code=outcome.code,
            emitted=outcome.ok,
            tool=call.name,
            tool_call_id=call.id,
            duration_ms=round((time.perf_counter() - started) * 1000.0, 3),
        )
        result = result.append(Context.tool_result(call.id, outcome.to_text(), name=call.name))
    return result


__all__ = ["execute_and_append_tools", "ToolSet"]
