r"""HTTP implementation of the registry client.

This module provides an async context manager-based client that queries
a RubyGems-compatible source over HTTP with httpx. The plain text compact
index and the JSON dependency API are decoded here. The legacy Marshal
indexes are decoded by ``load_specs_index`` unless another
``index_loader`` callable is given.
"""

from __future__ import annotations

__all__ = ["DEFAULT_SOURCE", "HttpRegistryClient", "MARSHAL_VERSION"]

import asyncio
import gzip
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from gemawait.client.compact_index import parse_info, parse_names, parse_versions
from gemawait.client.marshal_index import load_specs_index
from gemawait.core.config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_SOURCE
from gemawait.core.validation import validate_source, validate_timeout
from gemawait.exceptions import RegistryFormatError, RegistryRequestError
from gemawait.identifier import normalize_platform
from gemawait.utils.urls import filter_credentials

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import TracebackType
    from typing import Self

    from gemawait.client.protocol import IndexEntry, VersionEntry
    from gemawait.identifier import PackageIdentifier

logger: logging.Logger = logging.getLogger(__name__)

# Version of the Ruby Marshal format used in the legacy index file names
MARSHAL_VERSION = "4.8"

# Status codes meaning "this file is not there (yet)"
NOT_FOUND_STATUS_CODES = (401, 403, 404)

_GZIP_MAGIC = b"\x1f\x8b"


class HttpRegistryClient:
    r"""Registry client for a RubyGems-compatible HTTP source.

    Args:
        source: The base URL of the source. Credentials embedded in the URL
            are sent as basic auth and filtered out of logs and errors.
        timeout: Maximum seconds to wait for each response. Must be > 0.
        bypass_cache: Whether to ask intermediate caches for fresh content
            (``Cache-Control: no-cache``) on every request.
        index_loader: Optional callable decoding the uncompressed bytes of a
            legacy Marshal index into ``(name, version, platform)`` triples.
            ``None`` means ``load_specs_index``.
        cache_dir: Optional directory where fetched ``.gem`` archives are
            written.
        transport: Optional httpx transport, mostly useful for testing.

    Example:
        ```pycon
        >>> import asyncio
        >>> from gemawait.client import HttpRegistryClient
        >>> async def main():  # doctest: +SKIP
        ...     async with HttpRegistryClient("https://rubygems.org") as client:
        ...         return "rails" in await client.list_names()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        source: str = DEFAULT_SOURCE,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        bypass_cache: bool = True,
        index_loader: Callable[[bytes], Iterable[Sequence[Any]]] | None = None,
        cache_dir: Path | str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        validate_source(source)
        validate_timeout(timeout)
        self._source = source if source.endswith("/") else f"{source}/"
        self._timeout = timeout
        self._bypass_cache = bypass_cache
        self._index_loader = index_loader if index_loader is not None else load_specs_index
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._transport = transport

        # Client will be created when entering context
        self._client: httpx.AsyncClient | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(source={self.source!r}, bypass_cache={self._bypass_cache})"

    @property
    def source(self) -> str:
        """The source URL, with credentials filtered out."""
        return filter_credentials(self._source)

    async def __aenter__(self) -> Self:
        headers = {"Cache-Control": "no-cache"} if self._bypass_cache else {}
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "HttpRegistryClient must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._client

    def url(self, path: str) -> str:
        """Return the absolute URL of a path relative to the source."""
        return f"{self._source}{path.lstrip('/')}"

    async def _get(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        missing_ok: bool = False,
    ) -> httpx.Response | None:
        """Send a GET request and check its status.

        Args:
            path: The path relative to the source.
            params: Optional query parameters.
            missing_ok: If ``True``, a 401, 403 or 404 status returns
                ``None`` instead of raising.

        Returns:
            The response, or ``None`` for a missing file when ``missing_ok``.

        Raises:
            RegistryRequestError: If the request fails or returns an
                error status.
        """
        client = self._ensure_client()
        url = self.url(path)
        safe_url = filter_credentials(url)
        logger.debug(f"GET {safe_url}")
        try:
            response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise RegistryRequestError(
                url=safe_url,
                message=f"GET {safe_url} failed: {type(exc).__name__}: {exc}",
                cause=exc,
            ) from exc

        if response.status_code < 400:
            return response
        if missing_ok and response.status_code in NOT_FOUND_STATUS_CODES:
            logger.debug(f"GET {safe_url} returned {response.status_code}")
            return None
        raise RegistryRequestError(
            url=safe_url,
            message=f"GET {safe_url} failed with status {response.status_code}",
            status_code=response.status_code,
        )

    async def list_names(self) -> list[str]:
        response = await self._get("names")
        return parse_names(response.text)

    async def list_versions(self) -> dict[str, set[VersionEntry]]:
        response = await self._get("versions")
        return parse_versions(response.text)

    async def fetch_info(self, name: str) -> list[VersionEntry]:
        response = await self._get(f"info/{name}")
        return parse_info(response.text)

    async def fetch_gemspec(self, identifier: PackageIdentifier) -> bool:
        path = f"quick/Marshal.{MARSHAL_VERSION}/{identifier.full_name}.gemspec.rz"
        return await self._get(path, missing_ok=True) is not None

    def _write_cache(self, file_name: str, content: bytes) -> None:
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        (self._cache_dir / file_name).write_bytes(content)

    async def fetch_gem(self, identifier: PackageIdentifier) -> bool:
        file_name = f"{identifier.full_name}.gem"
        response = await self._get(f"gems/{file_name}", missing_ok=True)
        if response is None:
            return False
        if self._cache_dir is not None:
            await asyncio.to_thread(self._write_cache, file_name, response.content)
        return True

    async def fetch_full_index(self) -> list[IndexEntry]:
        return await self._fetch_legacy_index(f"specs.{MARSHAL_VERSION}.gz")

    async def fetch_prerelease_index(self) -> list[IndexEntry]:
        return await self._fetch_legacy_index(f"prerelease_specs.{MARSHAL_VERSION}.gz")

    async def _fetch_legacy_index(self, path: str) -> list[IndexEntry]:
        safe_url = filter_credentials(self.url(path))
        response = await self._get(path)
        content = response.content
        try:
            if content.startswith(_GZIP_MAGIC):
                content = gzip.decompress(content)
            return [
                (str(name), str(version), normalize_platform(None if platform is None else str(platform)))
                for name, version, platform in self._index_loader(content)
            ]
        except (OSError, EOFError, AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            raise RegistryFormatError(
                url=safe_url,
                message=f"Cannot decode {safe_url}: {exc}",
                cause=exc,
            ) from exc

    async def fetch_dependencies(self, names: Sequence[str]) -> list[IndexEntry]:
        if not names:
            return []
        path = "api/v1/dependencies.json"
        response = await self._get(path, params={"gems": ",".join(names)})
        try:
            return [
                (entry["name"], entry["number"], normalize_platform(entry.get("platform")))
                for entry in response.json()
            ]
        except (json.JSONDecodeError, KeyError, TypeError) as exc:
            safe_url = filter_credentials(self.url(path))
            raise RegistryFormatError(
                url=safe_url,
                message=f"Cannot decode {safe_url}: {exc}",
                cause=exc,
            ) from exc
