"""Model catalog: metadata records and spec lookup."""

from .model import DEFAULT_CAPABILITIES, Model
from .catalog import ModelCatalog, ModelSpec, get_default_catalog, parse_spec, set_default_catalog

__all__ = [
    "Model",
    "DEFAULT_CAPABILITIES",
    "ModelCatalog",
    "ModelSpec",
    "parse_spec",
    "get_default_catalog",
    "set_default_catalog",
]
