from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Union

from . import config

ZERO_HASH = "0x" + "00" * 32
NULL_CHARSET = "0x0000"


class Method(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    LOCATE = "LOCATE"
    DEFINE = "DEFINE"


# Bit positions of each method in a resource's "allowed methods" mask.
METHOD_BITS = {
    Method.HEAD: 0,
    Method.GET: 1,
    Method.PUT: 3,
    Method.PATCH: 4,
    Method.DELETE: 5,
    Method.LOCATE: 7,
    Method.DEFINE: 8,
}


def method_name(method: "Method | str") -> str:
    if isinstance(method, Method):
        return method.value
    return str(method).strip().upper()


def to_method(method: "Method | str") -> Method | None:
    """Returns the supported Method for a name, or None when unsupported."""
    try:
        return Method(method_name(method))
    except ValueError:
        return None


# --- Request side ---

@dataclass(frozen=True)
class RequestLine:
    path: str = "/"
    protocol: str = config.PROTOCOL_VERSION


@dataclass(frozen=True)
class ChunkRange:
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class RequestHeader:
    accept: tuple[str, ...] = ()
    accept_charset: tuple[str, ...] = ()
    accept_language: tuple[str, ...] = ()
    if_modified_since: int = 0
    if_none_match: str = ZERO_HASH


@dataclass(frozen=True)
class GetTarget:
    host: str
    range_start: int = 0
    range_end: int = 0


@dataclass(frozen=True)
class GetRequest:
    request_line: RequestLine
    request_header: RequestHeader
    target: GetTarget
    method: Method = Method.GET


@dataclass(frozen=True)
class HeadRequest:
    host: str
    request_line: RequestLine
    method: Method = Method.HEAD


@dataclass(frozen=True)
class LocateRequest:
    host: str
    request_line: RequestLine
    method: Method = Method.LOCATE


@dataclass(frozen=True)
class DeleteRequest:
    host: str
    request_line: RequestLine
    method: Method = Method.DELETE


@dataclass(frozen=True)
class PutRequest:
    host: str
    request_line: RequestLine
    mime_type: str
    charset: str
    location: str
    publisher: Any
    data: bytes
    method: Method = Method.PUT


@dataclass(frozen=True)
class PatchRequest:
    host: str
    request_line: RequestLine
    data: bytes
    chunk: int | None
    publisher: str
    method: Method = Method.PATCH


@dataclass(frozen=True)
class DefineRequest:
    host: str
    request_line: RequestLine
    header: Any
    method: Method = Method.DEFINE


@dataclass(frozen=True)
class ErrorRequest:
    method: str
    code: int
    message: str


WttpRequest = Union[
    GetRequest,
    HeadRequest,
    LocateRequest,
    DeleteRequest,
    PutRequest,
    PatchRequest,
    DefineRequest,
    ErrorRequest,
]


# --- Reply side ---

@dataclass(frozen=True)
class ResponseLine:
    code: int
    protocol: str = config.PROTOCOL_VERSION


@dataclass(frozen=True)
class CacheControl:
    max_age: int = 0
    s_maxage: int = 0
    no_store: bool = False
    no_cache: bool = False
    immutable_flag: bool = False
    must_revalidate: bool = False
    proxy_revalidate: bool = False
    stale_while_revalidate: int = 0
    stale_if_error: int = 0
    public_flag: bool = False
    private_flag: bool = False


@dataclass(frozen=True)
class Redirect:
    code: int = 0
    location: str = ""


@dataclass(frozen=True)
class HeaderInfo:
    cache: CacheControl = field(default_factory=CacheControl)
    methods: int = 0
    redirect: Redirect = field(default_factory=Redirect)
    resource_admin: str = ZERO_HASH


DEFAULT_HEADER = HeaderInfo(
    methods=sum(1 << METHOD_BITS[m] for m in (Method.HEAD, Method.GET, Method.LOCATE)),
)


@dataclass(frozen=True)
class ResourceMetadata:
    mime_type: str = ""
    charset: str = NULL_CHARSET
    encoding: str = ""
    language: str = ""
    location: str = ""
    size: int = 0
    version: int = 0
    last_modified: int = 0


@dataclass(frozen=True)
class HeadReply:
    response_line: ResponseLine
    header_info: HeaderInfo = field(default_factory=HeaderInfo)
    metadata: ResourceMetadata | None = None
    etag: str = ""


@dataclass(frozen=True)
class GetReply:
    head: HeadReply
    body: bytes = b""


@dataclass(frozen=True)
class LocateReply:
    head: HeadReply
    datapoints: tuple[str, ...] = ()


@dataclass(frozen=True)
class WriteReply:
    # 0 leaves the status to the method's success default.
    code: int = 0
    receipt: str = ""


@dataclass(frozen=True)
class ErrorReply:
    response_line: ResponseLine
    header_info: HeaderInfo = DEFAULT_HEADER
    body: str = ""


RawReply = Union[GetReply, HeadReply, LocateReply, WriteReply, ErrorReply]


# --- Collaborators ---

class NameService(Protocol):
    async def resolve_name(self, name: str) -> str | None:
        ...


class Identity(Protocol):
    async def get_address(self) -> str:
        ...


class ContentSession(Protocol):
    async def get(self, request_line: RequestLine, request_header: RequestHeader,
                  target: GetTarget) -> GetReply:
        ...

    async def head(self, host: str, request_line: RequestLine) -> HeadReply:
        ...

    async def locate(self, host: str, request_line: RequestLine) -> LocateReply:
        ...

    async def put(self, host: str, request_line: RequestLine, mime_type: str, charset: str,
                  location: str, publisher: Any, data: bytes, *, value: int) -> WriteReply | None:
        ...

    async def patch(self, host: str, request_line: RequestLine, data: bytes, chunk: int | None,
                    publisher: str, *, value: int) -> WriteReply | None:
        ...

    async def delete(self, host: str, request_line: RequestLine, *, value: int) -> WriteReply | None:
        ...

    async def define(self, host: str, request_line: RequestLine, header: Any,
                     *, value: int) -> WriteReply | None:
        ...


# --- Status Codes ---
class WttpStatusCode(Enum):
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
