"""Header negotiation.

Every parser here is total: header values are caller input, so anything the
vocabulary does not recognize degrades to a default or is dropped instead of
failing the request.
"""
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from . import vocabulary
from .wttp_protocol import NULL_CHARSET, ZERO_HASH, ChunkRange

_RANGE_PATTERN = re.compile(r"chunks=(\d+)-(\d+)?")
_CHUNK_INDEX_PATTERN = re.compile(r"^chunks=(\d+)")


@dataclass(frozen=True)
class HeaderOptions:
    mime_type: str | None = None
    charset: str = NULL_CHARSET
    location: str | None = None
    publisher: str | None = None
    range: ChunkRange = ChunkRange()
    chunk_index: int | None = None
    if_none_match: str = ZERO_HASH
    if_modified_since: int = 0
    accept: tuple[str, ...] = ()
    accept_charset: tuple[str, ...] = ()
    accept_language: tuple[str, ...] = ()


def parse_range(range_header: str | None) -> ChunkRange:
    if not range_header:
        return ChunkRange()

    match = _RANGE_PATTERN.search(range_header)
    if match is None:
        return ChunkRange()

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else 0
    # Reversed ranges break start <= end; treat them as no range.
    if end and end < start:
        return ChunkRange()
    return ChunkRange(start, end)


def parse_chunk_index(range_header: str | None) -> int | None:
    if not range_header:
        return None
    match = _CHUNK_INDEX_PATTERN.match(range_header.strip())
    return int(match.group(1)) if match else None


def parse_mime_type(content_type: str | None) -> str | None:
    if not content_type:
        return None
    return vocabulary.mime_code(content_type)


def parse_charset(content_type: str | None) -> str:
    if not content_type:
        return NULL_CHARSET
    return vocabulary.charset_code(content_type)


def parse_location(content_location: str | None) -> str | None:
    if not content_location:
        return None
    return vocabulary.location_code(content_location)


def _parse_list(value: str | None, table: Mapping[str, str]) -> list[str]:
    if not value:
        return []
    tokens = (token.strip() for token in value.split(","))
    return [table[token] for token in tokens if token in table]


def parse_accepts(accept: str | None) -> list[str]:
    return _parse_list(accept, vocabulary.MIME_TYPE_STRINGS)


def parse_accepts_charset(accept_charset: str | None) -> list[str]:
    return _parse_list(accept_charset, vocabulary.CHARSET_STRINGS)


def parse_accepts_language(accept_language: str | None) -> list[str]:
    return _parse_list(accept_language, vocabulary.LANGUAGE_STRINGS)


def parse_if_modified_since(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def negotiate(headers: Mapping[str, Any] | None) -> HeaderOptions:
    """Resolves request headers into HeaderOptions. Header names match case-insensitively."""
    lowered = {str(key).lower(): value for key, value in (headers or {}).items()}

    def text(name: str) -> str | None:
        value = lowered.get(name)
        return None if value is None else str(value)

    content_type = text("content-type")
    range_header = text("range")

    return HeaderOptions(
        mime_type=parse_mime_type(content_type),
        charset=parse_charset(content_type),
        location=parse_location(text("content-location")),
        publisher=text("publisher") or None,
        range=parse_range(range_header),
        chunk_index=parse_chunk_index(range_header),
        if_none_match=text("if-none-match") or ZERO_HASH,
        if_modified_since=parse_if_modified_since(lowered.get("if-modified-since")),
        accept=tuple(parse_accepts(text("accept"))),
        accept_charset=tuple(parse_accepts_charset(text("accept-charset"))),
        accept_language=tuple(parse_accepts_language(text("accept-language"))),
    )
