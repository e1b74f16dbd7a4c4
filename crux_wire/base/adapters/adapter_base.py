"""Base class for per-model option adapters.

Adapters cover the few models whose request options need handling beyond
what catalog metadata and constraints express: renaming token limits,
injecting defaults, stripping unsupported parameters.

Contract:
- ``matches`` decides from model metadata alone.
- ``transform_opts`` is pure: it returns a new dict and never mutates the
  options it receives, so the same inputs always yield the same output.
- A transform that fires records its adapter name under ``_adapter_applied``
  via :meth:`mark`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..catalog import Model

Options = Dict[str, Any]

APPLIED_KEY = "_adapter_applied"


class ModelAdapter:
    """No-op adapter; subclasses override ``matches`` and ``transform_opts``."""

    name: str = "model_adapter"

    def matches(self, model: Model) -> bool:
        return False

    def transform_opts(self, model: Model, opts: Mapping[str, Any]) -> Options:
        """Return the (possibly) transformed options.

        Parameters:
            model: Resolved catalog model the request targets.
            opts: Options produced by constraints and earlier adapters.
        """

        return dict(opts)

    def mark(self, opts: Options) -> Options:
        """Append this adapter's name to the debug trace of fired adapters."""
        opts[APPLIED_KEY] = [*opts.get(APPLIED_KEY, ()), self.name]
        return opts


__all__ = ["ModelAdapter", "Options", "APPLIED_KEY"]
