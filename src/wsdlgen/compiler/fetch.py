# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Content retrieval for WSDL and XSD documents.

Remote documents are fetched over HTTP(S) with optional basic
authentication and proxy settings; anything else is read from the local
filesystem. Each fetcher caches bodies by location for the lifetime of one
generation run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urljoin, urlparse

import requests

from wsdlgen.config.options import GeneratorOptions

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TIMEOUT = 60


class RetrievalError(Exception):
    """Raised when a document cannot be fetched or read."""


def is_url(location: str) -> bool:
    """Return True if *location* is a URL rather than a filesystem path."""
    return "://" in location


def resolve_location(base: str, reference: str) -> str:
    """Resolve a schema or import *reference* against the referencing document.

    Absolute URLs and absolute paths are returned unchanged. Relative
    references are joined with the URL or the directory of *base*.
    """
    if is_url(reference):
        return reference
    base = base.split("#", 1)[0]
    if is_url(base):
        return urljoin(base, reference)
    ref_path = Path(reference)
    if ref_path.is_absolute():
        return str(ref_path)
    return str(Path(base).parent / ref_path)


class ContentFetcher:
    """Fetches document bodies by location, caching them for one run."""

    def __init__(
        self,
        options: GeneratorOptions,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._options = options
        self._session = session
        self._timeout = timeout
        self._cache: dict[str, str] = {}

    def fetch(self, location: str) -> str:
        """Return the body of the document at *location*.

        Raises:
            RetrievalError: If the document is unreachable or unreadable.
        """
        cached = self._cache.get(location)
        if cached is not None:
            logger.debug("Using cached content for '%s'", location)
            return cached

        if is_url(location):
            content = self._fetch_url(location)
            if self._options.schemas_save:
                self._save_schema(location, content)
        else:
            content = self._read_file(location)

        self._cache[location] = content
        return content

    def clear(self) -> None:
        """Drop every cached body."""
        self._cache.clear()

    # ------------------------------------------------------------------
    # Retrieval helpers
    # ------------------------------------------------------------------

    def _fetch_url(self, url: str) -> str:
        logger.debug("Fetching '%s'", url)
        if self._session is None:
            self._session = requests.Session()
        try:
            response = self._session.get(
                url,
                auth=self._auth(),
                proxies=self._proxies(),
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RetrievalError(f"Cannot fetch '{url}': {exc}") from exc
        return response.text

    def _read_file(self, location: str) -> str:
        logger.debug("Reading '%s'", location)
        path = Path(location)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise RetrievalError(f"Document not found: {location}") from None
        except OSError as exc:
            raise RetrievalError(f"Cannot read document '{location}': {exc}") from exc

    def _auth(self) -> tuple[str, str] | None:
        if not self._options.basic_login:
            return None
        return (self._options.basic_login, self._options.basic_password or "")

    def _proxies(self) -> dict[str, str] | None:
        host = self._options.proxy_host
        if not host:
            return None
        credentials = ""
        if self._options.proxy_login:
            credentials = f"{self._options.proxy_login}:{self._options.proxy_password or ''}@"
        port = f":{self._options.proxy_port}" if self._options.proxy_port else ""
        proxy_url = f"http://{credentials}{host}{port}"
        return {"http": proxy_url, "https": proxy_url}

    def _save_schema(self, url: str, content: str) -> None:
        folder = Path(self._options.destination) / self._options.schemas_folder
        name = Path(urlparse(url).path).name or "schema.xsd"
        target = folder / name
        try:
            folder.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise RetrievalError(f"Cannot save schema '{url}' to '{target}': {exc}") from exc
        logger.debug("Saved '%s' to '%s'", url, target)
