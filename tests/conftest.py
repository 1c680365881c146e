import hashlib
from dataclasses import dataclass, field
from typing import Any

import pytest

from wttppy.wttp_protocol import (
    HeaderInfo,
    HeadReply,
    GetReply,
    LocateReply,
    ResourceMetadata,
    ResponseLine,
    WriteReply,
)
from wttppy.wttppy import WttpClient

SITE = "0x" + "12" * 20
OWNER = "0x" + "ab" * 20
OTHER = "0x" + "cd" * 20


def _hash(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


@dataclass
class StoredResource:
    mime_type: str
    charset: str
    location: str
    publisher: Any
    chunks: list[bytes] = field(default_factory=list)
    last_modified: int = 0

    @property
    def content(self) -> bytes:
        return b"".join(self.chunks)

    @property
    def etag(self) -> str:
        return _hash(self.content)


class InMemorySession:
    """A content session that keeps resources in a dict and records every call."""

    def __init__(self) -> None:
        self.resources: dict[tuple[str, str], StoredResource] = {}
        self.definitions: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, dict]] = []
        self._clock = 1_700_000_000

    def _tick(self) -> int:
        self._clock += 1
        return self._clock

    def _head(self, host: str, path: str, code: int = 200) -> HeadReply:
        resource = self.resources.get((host, path))
        if resource is None:
            return HeadReply(response_line=ResponseLine(code=404))
        metadata = ResourceMetadata(
            mime_type=resource.mime_type,
            charset=resource.charset,
            location=resource.location,
            size=len(resource.content),
            version=len(resource.chunks),
            last_modified=resource.last_modified,
        )
        header_info = self.definitions.get((host, path), HeaderInfo(methods=0b110111011))
        return HeadReply(
            response_line=ResponseLine(code=code),
            header_info=header_info,
            metadata=metadata,
            etag=resource.etag,
        )

    async def get(self, request_line, request_header, target):
        self.calls.append(("get", {"request_line": request_line, "request_header": request_header, "target": target}))
        resource = self.resources.get((target.host, request_line.path))
        if resource is None:
            return GetReply(head=self._head(target.host, request_line.path))

        if request_header.if_none_match == resource.etag:
            return GetReply(head=self._head(target.host, request_line.path, code=304))
        if request_header.if_modified_since and request_header.if_modified_since >= resource.last_modified:
            return GetReply(head=self._head(target.host, request_line.path, code=304))

        end = target.range_end or len(resource.chunks) - 1
        body = b"".join(resource.chunks[target.range_start:end + 1])
        return GetReply(head=self._head(target.host, request_line.path), body=body)

    async def head(self, host, request_line):
        self.calls.append(("head", {"host": host, "request_line": request_line}))
        return self._head(host, request_line.path)

    async def locate(self, host, request_line):
        self.calls.append(("locate", {"host": host, "request_line": request_line}))
        resource = self.resources.get((host, request_line.path))
        if resource is None:
            return LocateReply(head=self._head(host, request_line.path))
        return LocateReply(
            head=self._head(host, request_line.path),
            datapoints=tuple(_hash(chunk) for chunk in resource.chunks),
        )

    async def put(self, host, request_line, mime_type, charset, location, publisher, data, *, value):
        self.calls.append(("put", {
            "host": host, "request_line": request_line, "mime_type": mime_type, "charset": charset,
            "location": location, "publisher": publisher, "data": data, "value": value,
        }))
        self.resources[(host, request_line.path)] = StoredResource(
            mime_type=mime_type,
            charset=charset,
            location=location,
            publisher=publisher,
            chunks=[data],
            last_modified=self._tick(),
        )
        return WriteReply(receipt=_hash(data))

    async def patch(self, host, request_line, data, chunk, publisher, *, value):
        self.calls.append(("patch", {
            "host": host, "request_line": request_line, "data": data, "chunk": chunk,
            "publisher": publisher, "value": value,
        }))
        resource = self.resources.get((host, request_line.path))
        if resource is None:
            raise RuntimeError(f"Resource not found: {request_line.path}")

        if chunk is None or chunk == len(resource.chunks):
            resource.chunks.append(data)
        elif chunk < len(resource.chunks):
            resource.chunks[chunk] = data
        else:
            raise RuntimeError(f"Chunk {chunk} out of range")
        resource.last_modified = self._tick()
        return WriteReply(receipt=_hash(data))

    async def delete(self, host, request_line, *, value):
        self.calls.append(("delete", {"host": host, "request_line": request_line, "value": value}))
        if self.resources.pop((host, request_line.path), None) is None:
            return WriteReply(code=404)
        return WriteReply()

    async def define(self, host, request_line, header, *, value):
        self.calls.append(("define", {"host": host, "request_line": request_line, "header": header, "value": value}))
        self.definitions[(host, request_line.path)] = header
        return WriteReply()

    def seed(self, path: str, *chunks: bytes, host: str = SITE) -> None:
        self.resources[(host, path)] = StoredResource(
            mime_type="0x7468",
            charset="0x7574",
            location="0x0101",
            publisher=OWNER,
            chunks=list(chunks),
            last_modified=self._tick(),
        )


class FakeIdentity:
    def __init__(self, address: str = OWNER) -> None:
        self.address = address

    async def get_address(self) -> str:
        return self.address


class FakeNameService:
    def __init__(self, names: dict[str, str] | None = None) -> None:
        self.names = dict(names or {})
        self.lookups: list[str] = []

    async def resolve_name(self, name: str) -> str | None:
        self.lookups.append(name)
        return self.names.get(name)


@pytest.fixture
def session() -> InMemorySession:
    session = InMemorySession()
    session.seed("/test.html", b"<html><body>Hello World!</body></html>")
    session.seed("/multifile.html", *(f"Chunk {i}".encode() for i in range(1, 11)))
    return session


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def name_service() -> FakeNameService:
    return FakeNameService({"example.eth": SITE})


@pytest.fixture
def client(session, identity, name_service) -> WttpClient:
    return WttpClient(session, identity, name_service)
