from collections.abc import Awaitable, Callable
from typing import Any

from . import vocabulary
from .errors import InvalidRequestError
from .headers import HeaderOptions
from .wttp_protocol import (
    NULL_CHARSET,
    DefineRequest,
    DeleteRequest,
    ErrorRequest,
    GetRequest,
    GetTarget,
    HeadRequest,
    Identity,
    LocateRequest,
    Method,
    PatchRequest,
    PutRequest,
    RequestHeader,
    RequestLine,
    WttpRequest,
    WttpStatusCode,
    method_name,
    to_method,
)

Content = str | bytes | bytearray | memoryview | None
Builder = Callable[[str, RequestLine, HeaderOptions, Any, Identity], Awaitable[WttpRequest]]


def _to_bytes(content: Content) -> bytes:
    if content is None:
        return b""
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise InvalidRequestError(f"Request body must be text or bytes, not {type(content).__name__}.")


async def _build_get(host, request_line, options, content, identity) -> GetRequest:
    header = RequestHeader(
        accept=options.accept,
        accept_charset=options.accept_charset,
        accept_language=options.accept_language,
        if_modified_since=options.if_modified_since,
        if_none_match=options.if_none_match,
    )
    target = GetTarget(host=host, range_start=options.range.start, range_end=options.range.end)
    return GetRequest(request_line=request_line, request_header=header, target=target)


async def _build_head(host, request_line, options, content, identity) -> HeadRequest:
    return HeadRequest(host=host, request_line=request_line)


async def _build_locate(host, request_line, options, content, identity) -> LocateRequest:
    return LocateRequest(host=host, request_line=request_line)


async def _build_delete(host, request_line, options, content, identity) -> DeleteRequest:
    return DeleteRequest(host=host, request_line=request_line)


async def _build_put(host, request_line, options, content, identity) -> PutRequest:
    charset = options.charset
    if not charset or charset == NULL_CHARSET:
        charset = vocabulary.DEFAULT_CHARSET

    return PutRequest(
        host=host,
        request_line=request_line,
        mime_type=options.mime_type or vocabulary.DEFAULT_MIME_TYPE,
        charset=charset,
        location=options.location or vocabulary.DEFAULT_LOCATION,
        publisher=options.publisher or identity,
        data=_to_bytes(content),
    )


async def _build_patch(host, request_line, options, content, identity) -> PatchRequest:
    publisher = options.publisher
    if not publisher:
        publisher = await identity.get_address()

    return PatchRequest(
        host=host,
        request_line=request_line,
        data=_to_bytes(content),
        chunk=options.chunk_index,
        publisher=publisher,
    )


async def _build_define(host, request_line, options, content, identity) -> DefineRequest:
    if content is None:
        raise InvalidRequestError("DEFINE requests must carry a header definition.")
    return DefineRequest(host=host, request_line=request_line, header=content)


_BUILDERS: dict[Method, Builder] = {
    Method.GET: _build_get,
    Method.HEAD: _build_head,
    Method.LOCATE: _build_locate,
    Method.DELETE: _build_delete,
    Method.PUT: _build_put,
    Method.PATCH: _build_patch,
    Method.DEFINE: _build_define,
}


def build_unsupported(method: Method | str) -> ErrorRequest:
    name = method_name(method)
    return ErrorRequest(
        method=name,
        code=WttpStatusCode.NOT_IMPLEMENTED.value,
        message=f"Client Error: Unsupported method: {name}",
    )


async def build_request(
    method: Method | str,
    host: str,
    request_line: RequestLine,
    options: HeaderOptions,
    content: Any = None,
    identity: Identity | None = None,
) -> WttpRequest:
    """Builds the request variant for ``method``.

    Unsupported methods do not raise; they yield an ErrorRequest carrying a
    501 so the dispatcher can answer without contacting the store.
    """
    supported = to_method(method)
    if supported is None:
        return build_unsupported(method)
    return await _BUILDERS[supported](host, request_line, options, content, identity)
