"""crux_wire package

Provider-agnostic client runtime for remote LLM HTTP APIs.

Purpose:
    Present one canonical request/response model (contexts, tools, structured
    output, usage) over several provider wire dialects: OpenAI chat
    completions, OpenAI responses, Anthropic messages and OpenAI embeddings.

Public API (re-exported):
    - Operations: :func:`generate_text`, :func:`stream_text`,
      :func:`generate_object`, :func:`stream_object`, :func:`embed`
    - Conversation: :class:`Context`, :class:`Message`, :class:`ContentPart`,
      :class:`ToolCall`
    - Tools: :class:`Tool`, :func:`execute_and_append_tools`
    - Errors: :class:`ProviderError`, :class:`ErrorCode`, :class:`Result`
    - Catalog: :class:`Model`, :class:`ModelCatalog`, :func:`get_default_catalog`

Notes:
    Every operation returns a ``Result``; call ``unwrap()`` to raise the
    carried ``ProviderError`` instead.
"""

from .base.catalog import Model, ModelCatalog, get_default_catalog, set_default_catalog
from .base.errors import ErrorCode, ProviderError, Result
from .base.logging import configure_logger, get_logger
from .base.models import ContentPart, Context, Message, ToolCall
from .base.schema import compile_schema
from .base.tools import SimpleToolRouter, Tool, execute_and_append_tools
from .executor import (
    Response,
    StreamResponse,
    embed,
    generate_object,
    generate_text,
    stream_object,
    stream_text,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "generate_text",
    "stream_text",
    "generate_object",
    "stream_object",
    "embed",
    "Response",
    "StreamResponse",
    "Context",
    "Message",
    "ContentPart",
    "ToolCall",
    "Tool",
    "SimpleToolRouter",
    "execute_and_append_tools",
    "compile_schema",
    "ProviderError",
    "ErrorCode",
    "Result",
    "Model",
    "ModelCatalog",
    "get_default_catalog",
    "set_default_catalog",
    "configure_logger",
    "get_logger",
]
