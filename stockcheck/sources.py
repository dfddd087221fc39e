"""
Document Sources - Bridge to wherever the raw exports live.

The source pattern lets us swap implementations (HTTP in production,
local files for offline runs, in-memory for tests) without touching the
parsing or index code. A source only returns text or fails.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30

# Exports come out of Windows tooling as often as not
FALLBACK_ENCODINGS = ["utf-8-sig", "cp1252"]


class ResourceUnavailable(Exception):
    """Raised when a source cannot deliver the text of a resource."""

    def __init__(self, resource: str, message: Optional[str] = None):
        self.resource = resource
        super().__init__(message or f"Resource not found: {resource}")


def decode_bytes(data: bytes, encoding: Optional[str] = None) -> str:
    """
    Decode raw export bytes.

    An explicit encoding is used as-is; otherwise UTF-8 (with or without
    BOM) is tried before cp1252.
    """
    if encoding:
        return data.decode(encoding)

    for candidate in FALLBACK_ENCODINGS:
        try:
            return data.decode(candidate)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


class DocumentSource(ABC):
    """
    Abstract interface for raw document retrieval.

    Implementations are synchronous; the catalog runs them off the event
    loop.
    """

    @abstractmethod
    def fetch(self, name: str) -> str:
        """
        Return the full text of a named resource.

        Args:
            name: Resource name (file name of the export)

        Returns:
            Decoded document text

        Raises:
            ResourceUnavailable: if the resource cannot be retrieved
        """
        pass

    def describe(self, name: str) -> str:
        """Human-readable location of a resource, for messages."""
        return name


class HttpDocumentSource(DocumentSource):
    """
    Fetches exports over HTTP(S) from a base URL.

    The resource name is URL-quoted, so names with spaces or parentheses
    ("NATIVE_SPIRIT_REAPPROWEB_NS (2).csv") work unchanged.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        encoding: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.encoding = encoding
        self._session = session or requests.Session()

    def describe(self, name: str) -> str:
        return self.base_url + quote(name)

    def fetch(self, name: str) -> str:
        url = self.describe(name)
        try:
            resp = self._session.get(url, timeout=self.timeout, headers={"Cache-Control": "no-store"})
        except requests.RequestException as e:
            logger.error("Request for %s failed: %s", url, e)
            raise ResourceUnavailable(name, f"CSV not found: {url} ({e})") from e

        if not resp.ok:
            logger.error("Request for %s returned HTTP %s", url, resp.status_code)
            raise ResourceUnavailable(name, f"CSV not found: {url} (HTTP {resp.status_code})")

        try:
            return decode_bytes(resp.content, self.encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise ResourceUnavailable(name, f"Could not decode {url}: {e}") from e


class FileDocumentSource(DocumentSource):
    """Reads exports from a local directory."""

    def __init__(self, directory: str | Path, encoding: Optional[str] = None):
        self.directory = Path(directory)
        self.encoding = encoding

    def describe(self, name: str) -> str:
        return str(self.directory / name)

    def fetch(self, name: str) -> str:
        path = self.directory / name
        if not path.is_file():
            logger.error("Export file not found: %s", path)
            raise ResourceUnavailable(name, f"CSV not found: {path}")

        try:
            return decode_bytes(path.read_bytes(), self.encoding)
        except OSError as e:
            raise ResourceUnavailable(name, f"Could not read {path}: {e}") from e
        except (UnicodeDecodeError, LookupError) as e:
            raise ResourceUnavailable(name, f"Could not decode {path}: {e}") from e


class InMemoryDocumentSource(DocumentSource):
    """
    In-memory source for programmatic test setup.

    Counts fetches per resource so tests can check that loads are shared.
    """

    def __init__(self, documents: Optional[dict[str, str]] = None):
        self._documents = dict(documents or {})
        self.fetch_counts: dict[str, int] = {}

    def set_document(self, name: str, text: str):
        self._documents[name] = text

    def remove_document(self, name: str):
        self._documents.pop(name, None)

    def fetch(self, name: str) -> str:
        self.fetch_counts[name] = self.fetch_counts.get(name, 0) + 1
        if name not in self._documents:
            logger.error("In-memory document not found: %s", name)
            raise ResourceUnavailable(name, f"CSV not found: {name}")
        return self._documents[name]
