"""Schema compilation public surface."""

from .compiler import (
    CompiledSchema,
    DeclaredSchema,
    compile_schema,
    to_json,
    validate,
    validation_errors,
)

__all__ = ["CompiledSchema", "DeclaredSchema", "compile_schema", "to_json", "validate", "validation_errors"]
