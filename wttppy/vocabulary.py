"""Fixed tables between header strings and the store's two-byte codes.

The forward tables are looked up with the trimmed header text, exactly and
case-sensitively. The reverse tables decode codes read back from the store.
"""
from types import MappingProxyType

from .wttp_protocol import NULL_CHARSET

MIME_TYPE_STRINGS = MappingProxyType({
    "text/plain": "0x7470",
    "text/html": "0x7468",
    "text/css": "0x7463",
    "text/csv": "0x7473",
    "text/javascript": "0x746a",
    "text/markdown": "0x746d",
    "text/xml": "0x7478",
    "application/json": "0x616a",
    "application/xml": "0x6178",
    "application/pdf": "0x6170",
    "application/zip": "0x617a",
    "application/octet-stream": "0x616f",
    "application/javascript": "0x6173",
    "application/wasm": "0x6177",
    "image/png": "0x6970",
    "image/jpeg": "0x696a",
    "image/gif": "0x6967",
    "image/svg+xml": "0x6973",
    "image/webp": "0x6977",
    "image/x-icon": "0x6969",
    "audio/mpeg": "0x616d",
    "audio/wav": "0x6176",
    "video/mp4": "0x766d",
    "video/webm": "0x7677",
    "font/ttf": "0x6674",
    "font/woff": "0x6677",
    "font/woff2": "0x6632",
})

CHARSET_STRINGS = MappingProxyType({
    "utf-8": "0x7574",
    "utf-16": "0x7531",
    "utf-16le": "0x756c",
    "utf-16be": "0x7562",
    "us-ascii": "0x7561",
    "iso-8859-1": "0x6c31",
    "windows-1252": "0x7731",
})

LANGUAGE_STRINGS = MappingProxyType({
    "en-us": "0x6575",
    "en-gb": "0x6567",
    "fr-fr": "0x6672",
    "de-de": "0x6464",
    "es-es": "0x6573",
    "it-it": "0x6974",
    "pt-br": "0x7062",
    "ru-ru": "0x7272",
    "ja-jp": "0x6a6a",
    "ko-kr": "0x6b6b",
    "zh-cn": "0x7a63",
})

LOCATION_STRINGS = MappingProxyType({
    "datapoint/chunk": "0x0101",
    "url/http": "0x0201",
    "url/https": "0x0202",
    "url/ipfs": "0x0203",
    "url/arweave": "0x0204",
})


def _reverse(table):
    return MappingProxyType({code: name for name, code in table.items()})


MIME_TYPES = _reverse(MIME_TYPE_STRINGS)
CHARSETS = _reverse(CHARSET_STRINGS)
LANGUAGES = _reverse(LANGUAGE_STRINGS)
LOCATIONS = _reverse(LOCATION_STRINGS)

DEFAULT_MIME_TYPE = MIME_TYPE_STRINGS["text/html"]
DEFAULT_CHARSET = CHARSET_STRINGS["utf-8"]
DEFAULT_LOCATION = LOCATION_STRINGS["datapoint/chunk"]


def mime_code(name: str | None) -> str | None:
    if name is None:
        return None
    return MIME_TYPE_STRINGS.get(name.strip())


def charset_code(name: str | None) -> str:
    if name is None:
        return NULL_CHARSET
    return CHARSET_STRINGS.get(name.strip(), NULL_CHARSET)


def language_code(name: str | None) -> str | None:
    if name is None:
        return None
    return LANGUAGE_STRINGS.get(name.strip())


def location_code(name: str | None) -> str | None:
    if name is None:
        return None
    return LOCATION_STRINGS.get(name.strip())


def _normalize_code(code: str | None) -> str | None:
    if not code:
        return None
    return code.lower()


def mime_name(code: str | None) -> str | None:
    return MIME_TYPES.get(_normalize_code(code))


def charset_name(code: str | None) -> str | None:
    return CHARSETS.get(_normalize_code(code))


def language_name(code: str | None) -> str | None:
    return LANGUAGES.get(_normalize_code(code))


def location_name(code: str | None) -> str | None:
    return LOCATIONS.get(_normalize_code(code))
