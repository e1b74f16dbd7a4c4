"""Request orchestration for the public operations.

Pipeline per request:

1. Catalog lookup (``provider:id`` spec → :class:`Model`).
2. Prompt normalization and request validation.
3. Metadata constraints, then the ordered adapter pipeline.
4. Resolution of provider settings and wire dialect.
5. Body encoding, credential lookup and header assembly.
6. Transport: streamed lifecycle events (text/object) or one POST (embed).

Every public function returns a :class:`Result`. ``ProviderError`` raised by
any step is caught here and returned as ``Result.failure``; nothing below this
boundary converts errors into return values.
"""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from ..base.adapters import applied_adapters, apply_adapters
from ..base.catalog import Model, ModelCatalog, get_default_catalog
from ..base.constraints import apply_constraints
from ..base.errors import ErrorCode, ProviderError, Result
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..base.models import Context
from ..base.schema import CompiledSchema, compile_schema, validate
from ..base.streaming import StreamState
from ..base.tokens import normalize_usage
from ..base.validation import Operation, validate_request
from ..wire import WireProtocol, resolve
from ..wire.openai_embeddings import EmbeddingInput, OpenAIEmbeddings, Vector
from .response import Response, StreamResponse
from .transport import HttpRequest, Transport, get_default_transport

_logger = get_logger("crux_wire.executor")

ModelSpec = Union[str, Model, tuple]
Options = Optional[Mapping[str, Any]]


@dataclass(frozen=True)
class _Prepared:
    model: Model
    context: Context
    options: Dict[str, Any]
    request: HttpRequest
    wire: WireProtocol
    log_ctx: LogContext


def _request_id() -> str:
    return uuid.uuid4().hex


def _lookup(spec: ModelSpec, catalog: Optional[ModelCatalog]) -> Model:
    return (catalog or get_default_catalog()).lookup(spec)


def _url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + path


def _prepare_stream(
    spec: ModelSpec,
    prompt: Any,
    opts: Mapping[str, Any],
    operation: Operation,
    catalog: Optional[ModelCatalog],
) -> _Prepared:
    model = _lookup(spec, catalog)
    context = Context.normalize(prompt, system_prompt=opts.get("system_prompt"))
    validate_request(model, operation, context, opts, stream=True)
    options = apply_constraints(model, opts)
    options = apply_adapters(model, options)
    route = resolve(model, operation)
    wire: WireProtocol = route.wire  # type: ignore[assignment]
    log_ctx = LogContext(
        provider=model.provider,
        model=model.id,
        wire=wire.id.value,
        operation=operation,
        request_id=_request_id(),
    )
    fired = applied_adapters(options)
    if fired:
        normalized_log_event(_logger, "adapters.applied", log_ctx, phase="prepare", adapters=fired)
    api_key = route.provider.api_key(options).unwrap()
    base_url = route.provider.resolve_base_url(options)
    headers = route.provider.request_headers(api_key, wire.headers(options), stream=True)
    request = HttpRequest(
        url=_url(base_url, wire.endpoint()),
        headers=tuple(headers),
        body=wire.encode_body(model, context, options),
        base_url=base_url,
        provider=model.provider,
        model=model.id,
    )
    return _Prepared(model=model, context=context, options=options, request=request, wire=wire, log_ctx=log_ctx)


def _start(prepared: _Prepared, transport: Optional[Transport], operation: Operation) -> StreamResponse:
    normalized_log_event(_logger, "request.start", prepared.log_ctx, phase="start", url=prepared.request.url)
    events = (transport or get_default_transport()).stream(
        prepared.request, prepared.options.get("receive_timeout")
    )
    return StreamResponse(
        model=prepared.model,
        context=prepared.context,
        events=iter(events),
        state=StreamState(wire=prepared.wire, model=prepared.model),
        logger=_logger,
        log_ctx=prepared.log_ctx,
        operation=operation,
        adapters=applied_adapters(prepared.options),
    )


def _fail(error: ProviderError, spec: ModelSpec, operation: str) -> Result[Any]:
    normalized_log_event(
        _logger,
        "request.error",
        LogContext(operation=operation, provider=error.provider, model=error.model),
        phase="start",
        error_code=error.code.value,
        spec=str(spec),
        error=error.message,
    )
    return Result.failure(error)


def _stream(
    spec: ModelSpec,
    prompt: Any,
    opts: Mapping[str, Any],
    operation: Operation,
    catalog: Optional[ModelCatalog],
    transport: Optional[Transport],
) -> Result[StreamResponse]:
    try:
        prepared = _prepare_stream(spec, prompt, opts, operation, catalog)
        return Result.success(_start(prepared, transport, operation))
    except ProviderError as exc:
        return _fail(exc, spec, operation)


def stream_text(
    model_spec: ModelSpec,
    prompt: Any,
    opts: Options = None,
    *,
    catalog: Optional[ModelCatalog] = None,
    transport: Optional[Transport] = None,
) -> Result[StreamResponse]:
    """Start a streaming text generation.

    Args:
        model_spec: ``"provider:id"``, ``(provider, id)`` or a :class:`Model`.
        prompt: String, message, context or list of those.
        opts: Request options (``max_tokens``, ``temperature``, ``tools``,
            ``tool_choice``, ``reasoning_effort``, ``thinking``,
            ``receive_timeout``, ``api_key``, ``base_url``, ``system_prompt`` ...).
        catalog: Catalog used for lookup; the process default when omitted.
        transport: Transport to use; the pooled httpx transport when omitted.

    Returns:
        Result[StreamResponse]: a lazy stream; nothing is sent until it is iterated.
    """
    options = dict(opts or {})
    options["operation"] = "text"
    return _stream(model_spec, prompt, options, "text", catalog, transport)


def stream_object(
    model_spec: ModelSpec,
    prompt: Any,
    schema: Any,
    opts: Options = None,
    *,
    catalog: Optional[ModelCatalog] = None,
    transport: Optional[Transport] = None,
) -> Result[StreamResponse]:
    """Start a streaming structured-output generation for ``schema``."""
    try:
        compiled = compile_schema(schema)
    except ProviderError as exc:
        return _fail(exc, model_spec, "object")
    options = dict(opts or {})
    options["operation"] = "object"
    options["compiled_schema"] = compiled
    return _stream(model_spec, prompt, options, "object", catalog, transport)


def _finish(stream: StreamResponse) -> Result[Response]:
    stream.drain()
    if stream.error is not None:
        return Result.failure(stream.error)
    message = stream.to_message()
    return Result.success(
        Response(
            id=_request_id(),
            model=stream.model,
            context=stream.context.append(message),
            message=message,
            usage=stream.usage(),
            finish_reason=stream.finish_reason,
            provider_meta={"response_id": stream.response_id, "adapters": stream.adapters},
        )
    )


def generate_text(
    model_spec: ModelSpec,
    prompt: Any,
    opts: Options = None,
    *,
    catalog: Optional[ModelCatalog] = None,
    transport: Optional[Transport] = None,
) -> Result[Response]:
    """Generate text by consuming a stream to completion.

    The returned context is the normalized prompt plus the assistant message
    (text, thinking and any requested tool calls).
    """
    started = stream_text(model_spec, prompt, opts, catalog=catalog, transport=transport)
    if not started.ok:
        return Result.failure(started.error)  # type: ignore[arg-type]
    return _finish(started.unwrap())


def _parse_object(stream: StreamResponse, compiled: CompiledSchema) -> Any:
    text = stream.text()
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProviderError(
            ErrorCode.DECODE_ERROR,
            f"Failed to parse JSON: {exc.msg}",
            provider=stream.model.provider,
            model=stream.model.id,
            details={"raw_json": text},
        ) from exc
    if compiled.is_declared:
        return validate(value, compiled)
    return value


def generate_object(
    model_spec: ModelSpec,
    prompt: Any,
    schema: Any,
    opts: Options = None,
    *,
    catalog: Optional[ModelCatalog] = None,
    transport: Optional[Transport] = None,
) -> Result[Response]:
    """Generate a structured object that satisfies ``schema``.

    Failures: ``invalid_schema`` for a malformed schema, ``decode_error`` when
    the model output is not JSON, ``validation_errors`` (every violation) when
    it does not match a declared schema.
    """
    try:
        compiled = compile_schema(schema)
    except ProviderError as exc:
        return _fail(exc, model_spec, "object")
    started = stream_object(model_spec, prompt, compiled, opts, catalog=catalog, transport=transport)
    if not started.ok:
        return Result.failure(started.error)  # type: ignore[arg-type]
    stream = started.unwrap().drain()
    if stream.error is not None:
        return Result.failure(stream.error)
    try:
        value = _parse_object(stream, compiled)
    except ProviderError as exc:
        return Result.failure(exc)
    message = Context.assistant(json.dumps(value, ensure_ascii=False))
    return Result.success(
        Response(
            id=_request_id(),
            model=stream.model,
            context=stream.context.append(message),
            message=message,
            object=value,
            usage=stream.usage(),
            finish_reason="stop",
            provider_meta={"response_id": stream.response_id, "adapters": stream.adapters},
        )
    )


def _embed_request(model: Model, value: EmbeddingInput, opts: Mapping[str, Any]) -> HttpRequest:
    route = resolve(model, "embed")
    wire: OpenAIEmbeddings = route.wire  # type: ignore[assignment]
    api_key = route.provider.api_key(opts).unwrap()
    base_url = route.provider.resolve_base_url(opts)
    return HttpRequest(
        url=_url(base_url, wire.path()),
        headers=tuple(route.provider.request_headers(api_key, wire.headers(opts), stream=False)),
        body=wire.encode_body(model, value, opts),
        base_url=base_url,
        provider=model.provider,
        model=model.id,
    )


def embed(
    model_spec: ModelSpec,
    value: Any,
    opts: Options = None,
    *,
    catalog: Optional[ModelCatalog] = None,
    transport: Optional[Transport] = None,
) -> Result[Union[Vector, List[Vector]]]:
    """Embed a string (one vector) or a list of strings (vectors in input order)."""
    options = dict(opts or {})
    log_ctx = LogContext(operation="embed", request_id=_request_id())
    try:
        model = _lookup(model_spec, catalog)
        log_ctx = log_ctx.with_fields(provider=model.provider, model=model.id)
        validate_request(model, "embed", None, options)
        wire = resolve(model, "embed").wire
        wire.validate_input(value)  # type: ignore[union-attr]
        request = _embed_request(model, value, options)
        response = (transport or get_default_transport()).post(request)
        if not response.ok:
            raise ProviderError.http_error(
                response.status,
                provider=model.provider,
                model=model.id,
                body=response.content.decode("utf-8", errors="replace"),
            )
        try:
            decoded = json.loads(response.content)
        except json.JSONDecodeError as exc:
            raise ProviderError(
                ErrorCode.DECODE_ERROR,
                f"Failed to parse embedding response: {exc.msg}",
                provider=model.provider,
                model=model.id,
            ) from exc
        vectors = wire.extract(decoded, value)  # type: ignore[union-attr]
    except ProviderError as exc:
        log_event(_logger, "embed.error", log_ctx, error_code=exc.code.value, error=exc.message)
        return Result.failure(exc)
    log_event(
        _logger,
        "embed.end",
        log_ctx,
        count=len(vectors) if isinstance(value, list) else 1,
        tokens=normalize_usage(decoded.get("usage")) if isinstance(decoded, Mapping) else None,
    )
    return Result.success(vectors)


__all__ = ["generate_text", "stream_text", "generate_object", "stream_object", "embed", "ModelSpec"]
