"""Default temperature for ``openai:gpt-4o-mini``; an explicit value always wins."""

from __future__ import annotations

from typing import Any, Mapping

from ...config.defaults import GPT4O_MINI_DEFAULT_TEMPERATURE
from ..catalog import Model
from .adapter_base import ModelAdapter, Options


class GPT4oMiniAdapter(ModelAdapter):
    name = "gpt4o_mini"

    def matches(self, model: Model) -> bool:
        return model.provider == "openai" and model.id == "gpt-4o-mini"

    def transform_opts(self, model: Model, opts: Mapping[str, Any]) -> Options:
        out: Options = dict(opts)
        if out.get("temperature") is None:
            out["temperature"] = GPT4O_MINI_DEFAULT_TEMPERATURE
        return self.mark(out)


__all__ = ["GPT4oMiniAdapter"]
