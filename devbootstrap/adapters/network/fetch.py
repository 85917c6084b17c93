"""
Network fetch — whole-file HTTPS downloads.

Only ``https://`` URLs are accepted. There is no resume or
partial-content handling: a file either arrives whole or the fetch
fails with ``FetchError``.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import urlparse

from devbootstrap import __version__
from devbootstrap.core.errors import FetchError

logger = logging.getLogger(__name__)


class Fetcher(ABC):
    """{get(url) -> bytes | FetchError}"""

    @abstractmethod
    def get(self, url: str) -> bytes:
        """Return the body at ``url`` or raise ``FetchError``."""

    def download(self, url: str, dest: Path) -> Path:
        """Fetch ``url`` and write it to ``dest`` (parents created)."""
        data = self.get(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            dest.write_bytes(data)
        except OSError as e:
            raise FetchError(f"Cannot write {dest}: {e}") from e
        logger.debug("Saved %s (%d bytes) to %s", url, len(data), dest)
        return dest


class HttpFetcher(Fetcher):
    """urllib-based fetcher."""

    def get(self, url: str) -> bytes:
        if urlparse(url).scheme != "https":
            raise FetchError(f"Refusing non-HTTPS URL: {url}")

        req = urllib.request.Request(
            url,
            headers={"User-Agent": f"devbootstrap/{__version__}"},
        )
        try:
            with urllib.request.urlopen(req) as resp:
                return resp.read()
        except urllib.error.HTTPError as e:
            raise FetchError(f"HTTP {e.code} fetching {url}") from e
        except (urllib.error.URLError, OSError) as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e
