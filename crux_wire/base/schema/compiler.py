"""Declarative schema compilation for structured output and tool parameters.

Purpose:
    Turn a declared field list into (a) the JSON Schema sent to providers and
    (b) a runtime validator for the objects they return. A raw JSON-Schema
    mapping passes through untouched and is not validated locally.

Declared schema format:
    A sequence of ``(name, options)`` pairs. ``options`` keys:

    - ``type``: ``"string"`` (default), ``"integer"``, ``"pos_integer"``,
      ``"float"``, ``"number"``, ``"boolean"``, ``"map"``, ``"list"``,
      ``("list", <item type>)`` or ``("in", [choices...])``.
    - ``required``: bool, default ``False``.
    - ``doc``: optional description.

Notes:
    ``to_json`` lists every declared field in ``required`` by default because
    strict structured-output modes reject optional properties. Tool parameter
    schemas pass ``all_required=False`` and list only the fields declared
    required.

    Validation is delegated to a strict pydantic model built with
    ``create_model``. Every pydantic error is rendered as ``"<field>: is
    required"`` or ``"<field>: expected <type>, got <type>"`` and the whole
    list is reported at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from ..errors import ProviderError

TypeSpec = Union[str, Tuple[str, Any]]
DeclaredSchema = Sequence[Tuple[str, Mapping[str, Any]]]

_SCALAR_TAGS = ("string", "integer", "pos_integer", "float", "number", "boolean", "map", "list")


@dataclass(frozen=True)
class CompiledSchema:
    """Compiled schema wrapper.

    Attributes:
        schema: The declared field list or the raw JSON Schema mapping.
        validator: Strict pydantic model for declared schemas, ``None`` for raw ones.
    """

    schema: Union[DeclaredSchema, Mapping[str, Any]]
    validator: Optional[Type[BaseModel]] = None

    @property
    def is_declared(self) -> bool:
        return self.validator is not None


def _check_type(spec: Any) -> TypeSpec:
    if isinstance(spec, str):
        if spec not in _SCALAR_TAGS:
            raise ProviderError.invalid_schema(f"unknown type {spec!r}")
        return spec
    if isinstance(spec, (tuple, list)) and len(spec) == 2:
        tag, arg = spec
        if tag == "list":
            return ("list", _check_type(arg))
        if tag == "in":
            if not isinstance(arg, (list, tuple)) or not arg:
                raise ProviderError.invalid_schema("'in' type needs a non-empty list of choices")
            return ("in", tuple(arg))
    raise ProviderError.invalid_schema(f"unknown type {spec!r}")


def _python_type(spec: TypeSpec) -> Any:
    if spec == "string":
        return str
    if spec == "integer":
        return int
    if spec == "pos_integer":
        return Annotated[int, Field(gt=0)]
    if spec in ("float", "number"):
        return float
    if spec == "boolean":
        return bool
    if spec == "map":
        return Dict[str, Any]
    if spec == "list":
        return List[Any]
    tag, arg = spec  # type: ignore[misc]
    if tag == "list":
        return List[_python_type(arg)]  # type: ignore[misc]
    return Literal[arg]  # type: ignore[valid-type]


def _normalize_fields(schema: Any) -> List[Tuple[str, TypeSpec, bool, Optional[str]]]:
    if not isinstance(schema, (list, tuple)):
        raise ProviderError.invalid_schema(f"schema must be a field list or a mapping, got {type(schema).__name__}")
    seen = set()
    fields = []
    for entry in schema:
        if not (isinstance(entry, (list, tuple)) and len(entry) == 2 and isinstance(entry[1], Mapping)):
            raise ProviderError.invalid_schema(f"field entries must be (name, options) pairs, got {entry!r}")
        name, opts = str(entry[0]), entry[1]
        if not name or name in seen:
            raise ProviderError.invalid_schema(f"duplicate or empty field name {name!r}")
        seen.add(name)
        unknown = set(opts) - {"type", "required", "doc"}
        if unknown:
            raise ProviderError.invalid_schema(f"unknown options for {name}: {sorted(unknown)}")
        fields.append((name, _check_type(opts.get("type", "string")), bool(opts.get("required", False)), opts.get("doc")))
    return fields


def compile_schema(schema: Union[DeclaredSchema, Mapping[str, Any], CompiledSchema]) -> CompiledSchema:
    """Compile a declared field list; raw JSON Schema mappings pass through.

    Raises:
        ProviderError: ``invalid_schema`` for malformed declarations.
    """
    if isinstance(schema, CompiledSchema):
        return schema
    if isinstance(schema, Mapping):
        return CompiledSchema(schema=schema)
    fields = _normalize_fields(schema)
    definitions: Dict[str, Any] = {}
    for idx, (name, spec, required, _doc) in enumerate(fields):
        # Positional attribute names keep user field names clear of BaseModel attributes.
        default = ... if required else None
        definitions[f"f{idx}"] = (_python_type(spec), Field(default, alias=name))
    validator = create_model(  # type: ignore[call-overload]
        "DeclaredObject",
        __config__=ConfigDict(strict=True, extra="ignore", populate_by_name=False),
        **definitions,
    )
    return CompiledSchema(schema=tuple(schema), validator=validator)


def _type_json(spec: TypeSpec) -> Dict[str, Any]:
    if spec == "string":
        return {"type": "string"}
    if spec == "integer":
        return {"type": "integer"}
    if spec == "pos_integer":
        return {"type": "integer", "minimum": 1}
    if spec in ("float", "number"):
        return {"type": "number"}
    if spec == "boolean":
        return {"type": "boolean"}
    if spec == "map":
        return {"type": "object"}
    if spec == "list":
        return {"type": "array", "items": {"type": "string"}}
    tag, arg = spec  # type: ignore[misc]
    if tag == "list":
        return {"type": "array", "items": _type_json(arg)}
    out: Dict[str, Any] = {"enum": list(arg)}
    if all(isinstance(c, str) for c in arg):
        out["type"] = "string"
    return out


def to_json(schema: Union[DeclaredSchema, Mapping[str, Any], CompiledSchema], *, all_required: bool = True) -> Dict[str, Any]:
    """Render JSON Schema for a declared field list.

    Every declared field is listed in ``required`` unless ``all_required`` is
    ``False``. Raw mappings are returned unchanged.
    """
    if isinstance(schema, CompiledSchema):
        schema = schema.schema
    if isinstance(schema, Mapping):
        return dict(schema)
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, spec, is_required, doc in _normalize_fields(schema):
        prop = _type_json(spec)
        if doc:
            prop["description"] = doc
        properties[name] = prop
        if all_required or is_required:
            required.append(name)
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def format_type(spec: TypeSpec) -> str:
    if isinstance(spec, str):
        return spec
    tag, arg = spec
    if tag == "list":
        return f"list({format_type(arg)})"
    return "one of " + ", ".join(repr(c) for c in arg)


def type_of(value: Any) -> str:
    """Name the JSON-ish type of ``value`` as used in validation messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, (list, tuple)):
        return "list"
    if isinstance(value, Mapping):
        return "map"
    return type(value).__name__


def _type_at(spec: TypeSpec, path: Sequence[Any]) -> TypeSpec:
    for part in path:
        if isinstance(part, int) and isinstance(spec, tuple) and spec[0] == "list":
            spec = spec[1]
        else:
            break
    return spec


def _render(errors: List[Dict[str, Any]], specs: Dict[str, TypeSpec]) -> List[str]:
    out: List[str] = []
    for err in errors:
        loc = err.get("loc") or ("value",)
        field_name = str(loc[0])
        path = field_name + "".join(f"[{p}]" if isinstance(p, int) else f".{p}" for p in loc[1:])
        if err.get("type") == "missing":
            message = f"{path}: is required"
        else:
            expected = _type_at(specs.get(field_name, "string"), loc[1:])
            message = f"{path}: expected {format_type(expected)}, got {type_of(err.get('input'))}"
        if message not in out:
            out.append(message)
    return out


def validation_errors(value: Any, compiled: CompiledSchema) -> List[str]:
    """Return every violation of ``value`` against ``compiled`` (empty when valid)."""
    if not isinstance(value, Mapping):
        return [f"value: expected map, got {type_of(value)}"]
    if compiled.validator is None:
        return []
    try:
        compiled.validator.model_validate(dict(value))
    except ValidationError as exc:
        specs = {name: spec for name, spec, _r, _d in _normalize_fields(compiled.schema)}
        return _render(exc.errors(), specs)
    return []


def validate(value: Any, compiled: CompiledSchema) -> Dict[str, Any]:
    """Validate ``value`` and return it as a plain dict.

    Raises:
        ProviderError: ``validation_errors`` carrying the complete error list.
    """
    errors = validation_errors(value, compiled)
    if errors:
        raise ProviderError.validation_errors(errors, value=value)
    return dict(value)


__all__ = [
    "CompiledSchema",
    "DeclaredSchema",
    "TypeSpec",
    "compile_schema",
    "to_json",
    "validate",
    "validation_errors",
    "format_type",
    "type_of",
]
