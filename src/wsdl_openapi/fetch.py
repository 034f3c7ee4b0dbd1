"""Document fetching from local files and HTTP(S) locations.

Locations are absolute URIs. Local filesystem paths are converted to
``file:`` URIs by :func:`normalize_location` so that every document, whether
read from disk or over the network, is identified the same way.
"""

from pathlib import Path
from urllib.parse import urljoin, urlsplit, urlunsplit
from urllib.request import url2pathname

import httpx
import structlog

from wsdl_openapi.errors import FetchError

logger = structlog.get_logger(__name__)


def normalize_location(location: str, base: str | None = None) -> str:
    """Return the absolute, normalized URI for ``location``.

    Relative references are joined against ``base``. Bare filesystem paths
    become ``file:`` URIs. Scheme and host are lower-cased and any fragment
    is dropped, so equal strings mean the same document. Paths keep their
    case. A location that is not a valid URI raises :class:`FetchError`.
    """
    location = location.strip()
    try:
        if base is not None:
            absolute = urljoin(base, location)
        elif _has_scheme(location):
            absolute = location
        else:
            absolute = Path(location).expanduser().resolve().as_uri()
        parts = urlsplit(absolute)
    except ValueError as e:
        raise FetchError(location, f"invalid location: {e}") from e
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, ""))


def _has_scheme(location: str) -> bool:
    # A single letter is a Windows drive, not a scheme.
    return len(urlsplit(location).scheme) > 1


class Fetcher:
    """Reads raw document bytes from ``file:`` and ``http(s):`` locations."""

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def read(self, location: str) -> bytes:
        """Return the content found at an absolute ``location``."""
        scheme = urlsplit(location).scheme
        if scheme == "file":
            return self._read_file(location)
        if scheme in ("http", "https"):
            return self._read_http(location)
        raise FetchError(location, f"unsupported scheme '{scheme}'")

    def _read_file(self, location: str) -> bytes:
        path = Path(url2pathname(urlsplit(location).path))
        logger.debug("Reading file", path=str(path))
        try:
            return path.read_bytes()
        except OSError as e:
            raise FetchError(location, str(e)) from e

    def _read_http(self, location: str) -> bytes:
        logger.debug("Fetching URL", url=location)
        try:
            response = self.client.get(location)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(location, str(e)) from e
        return response.content

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
