"""Adapter for OpenAI reasoning models (o-series, GPT-5) on the responses dialect.

- Collapses ``max_tokens`` / ``max_output_tokens`` into one max-output field.
  An explicit ``max_completion_tokens`` wins; otherwise the value moves to
  ``max_output_tokens``. With nothing set, ``max_completion_tokens`` defaults
  to 16000.
- Defaults ``receive_timeout`` to 300000 ms.
- Removes ``temperature``.
"""

from __future__ import annotations

from typing import Any, Mapping

from ...config.defaults import REASONING_DEFAULT_MAX_COMPLETION_TOKENS
from ..catalog import Model
from ..timeouts import EXTENDED_RECEIVE_TIMEOUT_MS
from .adapter_base import ModelAdapter, Options


def _uses_responses_dialect(model: Model) -> bool:
    from ...wire.registry import WireProtocolId
    from ...wire.resolver import responses_api

    hint = model.wire_hint()
    if hint is not None:
        return hint == WireProtocolId.OPENAI_RESPONSES.value
    return responses_api(model)


class OpenAIReasoningAdapter(ModelAdapter):
    name = "openai_reasoning"

    def matches(self, model: Model) -> bool:
        return _uses_responses_dialect(model)

    def transform_opts(self, model: Model, opts: Mapping[str, Any]) -> Options:
        out: Options = dict(opts)
        if out.get("max_completion_tokens") is not None:
            out.pop("max_tokens", None)
        elif out.get("max_output_tokens") is not None or out.get("max_tokens") is not None:
            limit = out.get("max_output_tokens")
            out["max_output_tokens"] = limit if limit is not None else out["max_tokens"]
            out.pop("max_tokens", None)
        else:
            out["max_completion_tokens"] = REASONING_DEFAULT_MAX_COMPLETION_TOKENS
        out.setdefault("receive_timeout", EXTENDED_RECEIVE_TIMEOUT_MS)
        out.pop("temperature", None)
        return self.mark(out)


__all__ = ["OpenAIReasoningAdapter"]
