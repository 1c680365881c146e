import logging
from collections.abc import Mapping
from typing import Any

from . import config
from .builder import build_request, build_unsupported
from .dispatcher import dispatch
from .headers import negotiate
from .response import WttpResponse, normalize_response
from .url import HostResolver, parse_url
from .wttp_protocol import (
    ContentSession,
    Identity,
    Method,
    NameService,
    RequestLine,
    WttpRequest,
    method_name,
    to_method,
)

logger = logging.getLogger(__name__)


class WttpClient:
    def __init__(
        self,
        session: ContentSession,
        identity: Identity,
        name_service: NameService | None = None,
        protocol: str = config.PROTOCOL_VERSION,
    ):
        self._session = session
        self._identity = identity
        self._resolver = HostResolver(name_service)
        self._protocol = protocol

    async def fetch(
        self,
        url: str,
        method: Method | str = Method.GET,
        headers: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        identity: Identity | None = None,
        value: int = 0,
    ) -> WttpResponse:
        """Issues one request against the store and returns the normalized reply.

        ``body`` is the content for PUT/PATCH and the header definition for
        DEFINE. ``identity`` replaces the default publisher for this call only.
        ``value`` is the payment attached to write operations.
        """
        request = await self.prepare_request(method, url, headers, body, identity=identity)
        return await self.execute_request(request, value=value)

    async def prepare_request(
        self,
        method: Method | str,
        url: str,
        headers: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        identity: Identity | None = None,
    ) -> WttpRequest:
        parsed = parse_url(url)

        # Unsupported methods are answered without touching the resolver.
        if to_method(method) is None:
            return build_unsupported(method)

        host = await self._resolver.resolve(parsed.host)
        request_line = RequestLine(path=parsed.path, protocol=self._protocol)
        return await build_request(
            method,
            host,
            request_line,
            negotiate(headers),
            body,
            identity or self._identity,
        )

    async def execute_request(self, request: WttpRequest, value: int = 0) -> WttpResponse:
        raw = await dispatch(request, self._session, value=value)
        response = normalize_response(request.method, raw)
        logger.debug("%s -> %d", method_name(request.method), response.status)
        return response
