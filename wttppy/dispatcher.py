import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .errors import CollaboratorFault
from .wttp_protocol import (
    ContentSession,
    DefineRequest,
    DeleteRequest,
    ErrorReply,
    ErrorRequest,
    GetRequest,
    HeadRequest,
    LocateRequest,
    PatchRequest,
    PutRequest,
    RawReply,
    ResponseLine,
    WttpRequest,
)

logger = logging.getLogger(__name__)

Route = Callable[[Any, ContentSession, int], Awaitable[RawReply | None]]


async def _get(request: GetRequest, session: ContentSession, value: int):
    return await session.get(request.request_line, request.request_header, request.target)


async def _head(request: HeadRequest, session: ContentSession, value: int):
    return await session.head(request.host, request.request_line)


async def _locate(request: LocateRequest, session: ContentSession, value: int):
    return await session.locate(request.host, request.request_line)


async def _put(request: PutRequest, session: ContentSession, value: int):
    return await session.put(
        request.host,
        request.request_line,
        request.mime_type,
        request.charset,
        request.location,
        request.publisher,
        request.data,
        value=value,
    )


async def _patch(request: PatchRequest, session: ContentSession, value: int):
    return await session.patch(
        request.host,
        request.request_line,
        request.data,
        request.chunk,
        request.publisher,
        value=value,
    )


async def _delete(request: DeleteRequest, session: ContentSession, value: int):
    return await session.delete(request.host, request.request_line, value=value)


async def _define(request: DefineRequest, session: ContentSession, value: int):
    return await session.define(request.host, request.request_line, request.header, value=value)


_ROUTES: dict[type, Route] = {
    GetRequest: _get,
    HeadRequest: _head,
    LocateRequest: _locate,
    PutRequest: _put,
    PatchRequest: _patch,
    DeleteRequest: _delete,
    DefineRequest: _define,
}


def error_reply(request: ErrorRequest) -> ErrorReply:
    return ErrorReply(response_line=ResponseLine(code=request.code), body=request.message)


async def dispatch(request: WttpRequest, session: ContentSession, value: int = 0) -> RawReply | None:
    """Performs the single remote call for ``request``.

    ErrorRequest never reaches the session. ``value`` is the payment sent with
    write operations.
    """
    if isinstance(request, ErrorRequest):
        logger.debug("Answering %s locally with %d", request.method, request.code)
        return error_reply(request)

    route = _ROUTES.get(type(request))
    if route is None:
        logger.error("No route for request type %s", type(request).__name__)
        return None

    logger.debug("Dispatching %s %s", request.method.value, request.request_line.path)
    try:
        return await route(request, session, value)
    except Exception as e:
        logger.warning("%s %s failed: %s", request.method.value, request.request_line.path, e)
        raise CollaboratorFault(str(e)) from e
