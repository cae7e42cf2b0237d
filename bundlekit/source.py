"""Source resolution: raw module text, memoized in the input map."""

from __future__ import annotations

import asyncio
from pathlib import Path

from bundlekit.context import BuildContext
from bundlekit.paths import is_url, local_path


async def get_source(input: str, ctx: BuildContext) -> str:
    """
    Raw source of a module.

    Caller-supplied input map entries act as overrides (virtual files). Remote
    ids are downloaded into the remote cache before being read, ``file://``
    ids are read from their local path.

    Raises:
        OSError: The file cannot be read
        httpx.HTTPError: A remote fetch failed
    """
    if input not in ctx.input_map:
        if is_url(input):
            file_path = await ctx.remote.fetch(input)
        else:
            file_path = local_path(input)
        ctx.input_map[input] = await asyncio.to_thread(Path(file_path).read_text, encoding="utf-8")
    return ctx.input_map[input]


async def path_exists(path: str) -> bool:
    return await asyncio.to_thread(Path(path).exists)


async def get_mtime(path: str) -> float:
    stat = await asyncio.to_thread(Path(path).stat)
    return stat.st_mtime
