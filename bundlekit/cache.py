"""
Incremental Cache

Per-module cache of transformed source, keyed by the hash of the module id.

Validity:
    cache valid ⇔ not reload
                  ∧ cache file exists
                  ∧ mtime(cache file) ≥ mtime(source file)

Two edits within the filesystem's timestamp granularity can therefore
false-hit; content hashes are not compared.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from bundlekit.context import BuildContext
from bundlekit.paths import get_cache_output
from bundlekit.plugins.base import Plugin, run_pipeline
from bundlekit.source import get_mtime, get_source, path_exists
from bundlekit.types import GraphEntry


class CacheStatus(str, Enum):
    """Outcome of a cache lookup"""

    CHECK = "check"  # hit, reused
    CREATE = "create"  # no cache file yet
    UPDATE = "update"  # cache file stale or reload forced

    @property
    def regenerated(self) -> bool:
        return self is not CacheStatus.CHECK


@dataclass
class CacheResult:
    """Text contributed by one dependency"""

    text: str
    cache_path: str
    status: CacheStatus


class IncrementalCache:
    """
    Reuse-or-regenerate decision for module sources.

    Usage:
        >>> cache = IncrementalCache(ctx, transformers)
        >>> result = await cache.resolve("src/util.js", ctx.graph["src/util.js"])
        >>> result.status
        CacheStatus.CHECK
    """

    def __init__(self, ctx: BuildContext, transformers: Sequence[Plugin] = ()) -> None:
        self.ctx = ctx
        self.transformers = list(transformers)
        self.cache_dir = ctx.settings.cache_path
        self._stats = {"hits": 0, "misses": 0}

    async def is_valid(self, cache_path: str, source_path: str) -> bool:
        if self.ctx.reload or not await path_exists(cache_path):
            return False
        # virtual modules (input map only) have no mtime to compare against
        if not await path_exists(source_path):
            return False
        return await get_mtime(cache_path) >= await get_mtime(source_path)

    async def resolve(self, dependency: str, entry: GraphEntry) -> CacheResult:
        """
        Text of ``dependency`` for inclusion in a bundle.

        On a miss the transformers run and the result is stored in the cache
        map; persisting it to ``cache_path`` is the caller's job.
        """
        cache_path = get_cache_output(dependency, self.cache_dir)

        if await self.is_valid(cache_path, entry.path):
            self._stats["hits"] += 1
            return CacheResult(await self.read(cache_path), cache_path, CacheStatus.CHECK)

        self._stats["misses"] += 1
        cache_exists = await path_exists(cache_path)

        source = await get_source(entry.path, self.ctx)
        source = await run_pipeline(self.transformers, dependency, source, self.ctx)
        self.ctx.cache_map[cache_path] = source

        status = CacheStatus.UPDATE if cache_exists else CacheStatus.CREATE
        return CacheResult(source, cache_path, status)

    async def read(self, cache_path: str) -> str:
        """Cached text, memoized in the cache map"""
        cache_map = self.ctx.cache_map
        if cache_path not in cache_map:
            cache_map[cache_path] = await asyncio.to_thread(Path(cache_path).read_text, encoding="utf-8")
        return cache_map[cache_path]

    def get_stats(self) -> dict[str, float]:
        total = self._stats["hits"] + self._stats["misses"]
        return {
            "hits": self._stats["hits"],
            "misses": self._stats["misses"],
            "hit_rate": self._stats["hits"] / total if total > 0 else 0.0,
        }
