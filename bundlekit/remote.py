"""
Remote Module Cache

Fetches remote (URL) modules once and keeps a local copy so the graph builder
and the transform cache can treat them like local files.

Layout:
    <remote_dir>/<sha256(url)>

A local copy is reused until reload is forced; remote modules are assumed to
be immutable (versioned URLs).
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx

from bundlekit.logging import get_logger
from bundlekit.paths import hash_id

logger = get_logger(__name__)


class RemoteModuleCache:
    """
    httpx-backed fetcher for remote modules.

    Attributes:
        cache_dir: Directory holding local copies
        client: Async HTTP client (created lazily when not injected)
    """

    def __init__(
        self,
        cache_dir: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        reload: bool = False,
    ) -> None:
        self.cache_dir = cache_dir
        self.timeout = timeout
        self.reload = reload
        self._client = client
        self._owns_client = client is None
        self._fetched: set[str] = set()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    def resolve(self, url: str) -> str:
        """Local path of a remote module (whether fetched yet or not)"""
        return str(Path(self.cache_dir) / hash_id(url))

    async def fetch(self, url: str) -> str:
        """
        Make sure a local copy of ``url`` exists.

        Each URL is downloaded at most once per cache instance, even when
        reload is forced.

        Returns:
            Local path of the copy

        Raises:
            httpx.HTTPError: HTTP request failed
        """
        local = Path(self.resolve(url))
        if url in self._fetched:
            return str(local)
        if not self.reload and await asyncio.to_thread(local.exists):
            self._fetched.add(url)
            return str(local)

        response = await self.client.get(url)
        response.raise_for_status()

        await asyncio.to_thread(local.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(local.write_text, response.text, encoding="utf-8")
        self._fetched.add(url)
        logger.info("download", url=url, path=str(local))
        return str(local)

    async def close(self) -> None:
        """Close HTTP client (only if this cache created it)"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
