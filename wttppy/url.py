import logging
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from .errors import ResolutionError, UrlParseError
from .wttp_protocol import NameService

logger = logging.getLogger(__name__)

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class ParsedUrl:
    host: str
    path: str = "/"


def parse_url(url: str) -> ParsedUrl:
    if not isinstance(url, str) or "://" not in url:
        raise UrlParseError(f"Invalid URL: {url!r}")

    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise UrlParseError(f"Invalid URL: {url!r}") from e

    if not parts.scheme or not parts.netloc:
        raise UrlParseError(f"Invalid URL: {url!r}")

    path = parts.path or "/"
    if not path.startswith("/"):
        path = "/" + path
    return ParsedUrl(host=parts.netloc, path=path)


def is_address(host: str) -> bool:
    return bool(_ADDRESS_PATTERN.match(host))


class HostResolver:
    def __init__(self, name_service: NameService | None = None):
        self._name_service = name_service

    async def resolve(self, host: str) -> str:
        if is_address(host):
            return host

        if self._name_service is None:
            raise ResolutionError(f"No name service configured to resolve host '{host}'")

        try:
            address = await self._name_service.resolve_name(host)
        except Exception as e:
            raise ResolutionError(f"Lookup failed for host '{host}': {e}") from e

        if not address:
            raise ResolutionError(f"Could not resolve host '{host}'")

        logger.debug("Resolved %s to %s", host, address)
        return address
