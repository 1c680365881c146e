import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from email.utils import formatdate
from functools import cached_property
from types import MappingProxyType
from typing import Any

from . import vocabulary
from .wttp_protocol import (
    METHOD_BITS,
    CacheControl,
    ErrorReply,
    GetReply,
    HeaderInfo,
    HeadReply,
    LocateReply,
    Method,
    ResourceMetadata,
    WriteReply,
    WttpStatusCode,
    method_name,
    to_method,
)

logger = logging.getLogger(__name__)

_WRITE_DEFAULTS = {
    Method.PUT: WttpStatusCode.CREATED.value,
    Method.PATCH: WttpStatusCode.OK.value,
    Method.DELETE: WttpStatusCode.OK.value,
    Method.DEFINE: WttpStatusCode.OK.value,
}


@dataclass(frozen=True)
class WttpResponse:
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @cached_property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)


def format_cache_control(cache: CacheControl) -> str:
    directives = []
    if cache.public_flag:
        directives.append("public")
    if cache.private_flag:
        directives.append("private")
    if cache.no_store:
        directives.append("no-store")
    if cache.no_cache:
        directives.append("no-cache")
    if cache.max_age:
        directives.append(f"max-age={cache.max_age}")
    if cache.s_maxage:
        directives.append(f"s-maxage={cache.s_maxage}")
    if cache.immutable_flag:
        directives.append("immutable")
    if cache.must_revalidate:
        directives.append("must-revalidate")
    if cache.proxy_revalidate:
        directives.append("proxy-revalidate")
    if cache.stale_while_revalidate:
        directives.append(f"stale-while-revalidate={cache.stale_while_revalidate}")
    if cache.stale_if_error:
        directives.append(f"stale-if-error={cache.stale_if_error}")
    return ", ".join(directives)


def format_allow(methods: int) -> str:
    return ", ".join(m.value for m, bit in METHOD_BITS.items() if methods & (1 << bit))


def header_info_headers(info: HeaderInfo) -> dict[str, str]:
    headers = {}
    cache_control = format_cache_control(info.cache)
    if cache_control:
        headers["cache-control"] = cache_control
    allow = format_allow(info.methods)
    if allow:
        headers["allow"] = allow
    if info.redirect.code:
        headers["location"] = info.redirect.location
    return headers


def metadata_headers(metadata: ResourceMetadata) -> dict[str, str]:
    headers = {}
    mime = vocabulary.mime_name(metadata.mime_type)
    charset = vocabulary.charset_name(metadata.charset)
    if mime and charset:
        headers["content-type"] = f"{mime}; charset={charset}"
    elif mime:
        headers["content-type"] = mime

    language = vocabulary.language_name(metadata.language)
    if language:
        headers["content-language"] = language
    location = vocabulary.location_name(metadata.location)
    if location:
        headers["content-location"] = location
    if metadata.encoding:
        headers["content-encoding"] = metadata.encoding

    headers["content-length"] = str(metadata.size)
    if metadata.last_modified:
        headers["last-modified"] = formatdate(metadata.last_modified, usegmt=True)
    return headers


def head_headers(head: HeadReply) -> dict[str, str]:
    headers = header_info_headers(head.header_info)
    if head.metadata is not None:
        headers.update(metadata_headers(head.metadata))
    if head.etag:
        headers["etag"] = f'"{head.etag}"'
    return headers


def internal_error() -> WttpResponse:
    return WttpResponse(
        status=WttpStatusCode.INTERNAL_SERVER_ERROR.value,
        headers={"content-type": "text/plain; charset=utf-8"},
        body=b"Internal Server Error",
    )


def _normalize_error(method, raw: ErrorReply) -> WttpResponse:
    headers = header_info_headers(raw.header_info)
    headers["content-type"] = "text/plain; charset=utf-8"
    return WttpResponse(status=raw.response_line.code, headers=headers, body=raw.body.encode("utf-8"))


def _normalize_get(method, raw: GetReply) -> WttpResponse:
    body = bytes(raw.body)
    headers = head_headers(raw.head)
    headers["content-length"] = str(len(body))
    return WttpResponse(status=raw.head.response_line.code, headers=headers, body=body)


def _normalize_head(method, raw: HeadReply) -> WttpResponse:
    return WttpResponse(status=raw.response_line.code, headers=head_headers(raw))


def _normalize_locate(method, raw: LocateReply) -> WttpResponse:
    body = "\n".join(raw.datapoints).encode("utf-8")
    headers = head_headers(raw.head)
    return WttpResponse(status=raw.head.response_line.code, headers=headers, body=body)


def _normalize_write(method, raw: WriteReply) -> WttpResponse:
    default = _WRITE_DEFAULTS.get(to_method(method))
    if default is None:
        logger.error("Write reply received for non-write method %s", method_name(method))
        return internal_error()

    headers = {}
    if raw.receipt:
        headers["x-wttp-receipt"] = raw.receipt
    return WttpResponse(status=raw.code or default, headers=headers)


_NORMALIZERS = {
    ErrorReply: _normalize_error,
    GetReply: _normalize_get,
    HeadReply: _normalize_head,
    LocateReply: _normalize_locate,
    WriteReply: _normalize_write,
}


def normalize_response(method: Method | str, raw: Any) -> WttpResponse:
    """Turns a raw session reply into a WttpResponse.

    A missing or unrecognized reply becomes a 500 rather than None.
    """
    if raw is None:
        logger.error("No reply produced for %s", method_name(method))
        return internal_error()

    normalizer = _NORMALIZERS.get(type(raw))
    if normalizer is None:
        logger.error("Unrecognized reply %s for %s", type(raw).__name__, method_name(method))
        return internal_error()
    return normalizer(method, raw)
