"""Caller-supplied tool definition.

Purpose:
    Pair a callable with the name, description and parameter schema a model
    needs in order to request it. The parameter schema is compiled eagerly so
    a malformed declaration fails at definition time, not mid-conversation.

Notes:
    ``execute`` never raises. Bad input, validation failures and callback
    exceptions are reported through :class:`ToolResultDTO` with ``ok=False``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..dto.tool_result import ToolResultDTO
from ..errors import ProviderError
from ..schema import CompiledSchema, DeclaredSchema, compile_schema, to_json, validation_errors

ToolCallback = Callable[[Dict[str, Any]], Any]

_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
MAX_TOOL_NAME_LENGTH = 64


def valid_tool_name(name: Any) -> bool:
    return isinstance(name, str) and len(name) <= MAX_TOOL_NAME_LENGTH and bool(_NAME_RE.match(name))


def _normalize_content(result: Any) -> Union[str, Dict[str, Any]]:
    if isinstance(result, str):
        return result
    text = json.dumps(result, ensure_ascii=False, default=str)
    # dicts keyed by anything but str travel as their JSON text
    if isinstance(result, dict) and all(isinstance(key, str) for key in result):
        return result
    return text


@dataclass(frozen=True)
class Tool:
    """A named, described and schema-checked callback.

    Attributes:
        name: Identifier the model uses to request the tool.
        description: Text shown to the model.
        callback: Callable receiving the parsed argument dict.
        parameter_schema: Declared field list or raw JSON Schema mapping.
        compiled: Compiled parameter schema.
        strict: Ask providers for strict argument adherence.
    """

    name: str
    description: str
    callback: ToolCallback
    parameter_schema: Union[DeclaredSchema, Mapping[str, Any]] = ()
    compiled: Optional[CompiledSchema] = field(default=None, compare=False)
    strict: bool = False

    @classmethod
    def new(
        cls,
        name: str,
        description: str,
        callback: ToolCallback,
        *,
        parameter_schema: Union[DeclaredSchema, Mapping[str, Any], None] = None,
        strict: bool = False,
    ) -> "Tool":
        """Validate and build a tool.

        Raises:
            ProviderError: ``invalid_parameter`` for a bad name or callback,
                ``invalid_schema`` for a malformed parameter schema.
        """
        if not valid_tool_name(name):
            raise ProviderError.invalid_parameter(
                f"tool name {name!r} must be an identifier (letters, digits, underscore) of at most 64 characters"
            )
        if not callable(callback):
            raise ProviderError.invalid_parameter(f"tool {name} callback must be callable")
        schema = parameter_schema if parameter_schema is not None else ()
        compiled = compile_schema(schema)
        return cls(
            name=name,
            description=description,
            callback=callback,
            parameter_schema=compiled.schema,
            compiled=compiled,
            strict=strict,
        )

    def execute(self, arguments: Any) -> ToolResultDTO:
        """Validate ``arguments`` and run the callback."""
        if not isinstance(arguments, Mapping):
            return ToolResultDTO(
                name=self.name,
                ok=False,
                code="invalid_input",
                error=f"input must be a map, got {type(arguments).__name__}",
            )
        args = dict(arguments)
        if self.compiled is not None and self.compiled.is_declared:
            errors = validation_errors(args, self.compiled)
            if errors:
                return ToolResultDTO(
                    name=self.name,
                    ok=False,
                    code="validation_failed",
                    error="; ".join(errors),
                    metadata={"errors": errors},
                )
        try:
            result = self.callback(args)
            return ToolResultDTO(name=self.name, ok=True, content=_normalize_content(result))
        except Exception as exc:  # noqa: BLE001 - tool failures become message content
            return ToolResultDTO(name=self.name, ok=False, code="callback_failed", error=str(exc) or type(exc).__name__)

    def parameters_json(self) -> Dict[str, Any]:
        """JSON Schema for the parameters; only declared-required fields are required."""
        return to_json(self.compiled or self.parameter_schema, all_required=False)

    def to_schema(self, provider: str = "openai") -> Dict[str, Any]:
        """Render the provider-specific tool declaration.

        Raises:
            ProviderError: ``invalid_parameter`` for an unknown provider format.
        """
        params = self.parameters_json()
        if provider == "openai":
            function: Dict[str, Any] = {"name": self.name, "description": self.description, "parameters": params}
            if self.strict:
                function["strict"] = True
            return {"type": "function", "function": function}
        if provider == "anthropic":
            out: Dict[str, Any] = {"name": self.name, "description": self.description, "input_schema": params}
            if self.strict:
                out["strict"] = True
            return out
        if provider == "google":
            params.pop("additionalProperties", None)
            return {"name": self.name, "description": self.description, "parameters": params}
        raise ProviderError.invalid_parameter(f"unknown tool schema format {provider!r}")


__all__ = ["Tool", "ToolCallback", "valid_tool_name", "MAX_TOOL_NAME_LENGTH"]
