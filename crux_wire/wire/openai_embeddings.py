"""OpenAI embeddings dialect (non-streaming).

Request path ``/embeddings`` relative to the ``/v1`` base URL. The body is
``{model, input, dimensions?, encoding_format?}``; the response carries
``data: [{index, embedding}]``.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Union

from ..base.catalog import Model
from ..base.errors import ErrorCode, ProviderError
from .base import Body, Header
from .registry import WireProtocolId

EmbeddingInput = Union[str, List[str]]
Vector = List[float]


class OpenAIEmbeddings:
    id = WireProtocolId.OPENAI_EMBEDDINGS

    def path(self) -> str:
        return "/embeddings"

    @staticmethod
    def validate_input(value: Any) -> None:
        """Reject empty or non-string input before any request is built.

        Raises:
            ProviderError: ``invalid_parameter`` naming the offending shape.
        """
        if isinstance(value, str):
            if value == "":
                raise ProviderError.invalid_parameter("input: cannot be empty")
            return
        if isinstance(value, list):
            if not value:
                raise ProviderError.invalid_parameter("input: cannot be empty list")
            if not all(isinstance(item, str) for item in value):
                raise ProviderError.invalid_parameter("input: all items must be strings")
            if any(item == "" for item in value):
                raise ProviderError.invalid_parameter("input: contains empty string")
            return
        raise ProviderError.invalid_parameter("input: must be string or list of strings")

    def encode_body(self, model: Model, value: EmbeddingInput, opts: Mapping[str, Any]) -> Body:
        body: Body = {"model": model.id, "input": value}
        if opts.get("dimensions"):
            body["dimensions"] = opts["dimensions"]
        if opts.get("encoding_format"):
            body["encoding_format"] = opts["encoding_format"]
        return body

    def headers(self, opts: Mapping[str, Any]) -> List[Header]:
        return [("Content-Type", "application/json")]

    def extract(self, response: Any, value: EmbeddingInput) -> Union[Vector, List[Vector]]:
        """Pull vectors out of a decoded response.

        A string input yields one vector; a list input yields vectors ordered
        by their ``index``.

        Raises:
            ProviderError: ``decode_error`` for any other response shape.
        """
        data = response.get("data") if isinstance(response, Mapping) else None
        if isinstance(data, list):
            if isinstance(value, str) and len(data) == 1 and isinstance(data[0], Mapping) and "embedding" in data[0]:
                return data[0]["embedding"]
            if isinstance(value, list) and all(isinstance(item, Mapping) for item in data):
                ordered = sorted(data, key=lambda item: item.get("index") or 0)
                return [item.get("embedding") for item in ordered]
        raise ProviderError(
            code=ErrorCode.DECODE_ERROR,
            message="Invalid embedding response format",
            details={"response": response},
        )


OPENAI_EMBEDDINGS = OpenAIEmbeddings()

__all__ = ["OpenAIEmbeddings", "OPENAI_EMBEDDINGS", "EmbeddingInput", "Vector"]
