"""
Graph Builder

Discovers the transitive module graph of a set of entries: import edges plus
re-export edges. Cycles are fine, every id is processed at most once per call.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from bundlekit.context import BuildContext
from bundlekit.errors import DependencyNotFoundError, ExportNotFoundError, ImportNotFoundError
from bundlekit.logging import get_logger
from bundlekit.paths import get_output, is_url, local_path
from bundlekit.plugins.base import Loader, run_loaders
from bundlekit.source import get_source, path_exists
from bundlekit.types import Graph, GraphEntry

logger = get_logger(__name__)


async def create_graph(
    inputs: Iterable[str],
    loaders: Sequence[Loader],
    ctx: BuildContext,
) -> Graph:
    """
    Resolve ``inputs`` and everything they reach into ``ctx.graph``.

    Entries already present in the graph are trusted (not re-read) unless
    reload is forced; their edges are still followed.

    Args:
        inputs: Entry module ids (the last one is processed first)
        loaders: Ordered loaders, first match wins
        ctx: Build context holding graph, file map and input map

    Returns:
        The context's graph

    Raises:
        ImportNotFoundError: A local import target does not exist
        ExportNotFoundError: A local re-export target does not exist
    """
    graph = ctx.graph
    queue = list(inputs)
    checked: set[str] = set()

    while queue:
        input = queue.pop()
        if input in checked:
            continue
        checked.add(input)

        entry = graph.get(input)
        if entry is not None and not ctx.reload:
            queue.extend(entry.imports)
            queue.extend(entry.exports)
            continue

        source = await get_source(input, ctx)
        result = await run_loaders(loaders, input, source, ctx)
        if result is None:
            # TODO: decide whether unclaimed modules (assets) should be copied to out_dir
            logger.debug("no_loader", input=input)
            continue

        entry = graph[input] = GraphEntry(
            path=ctx.resolve_path(input),
            output=get_output(input, ctx.file_map, ctx.settings.deps_path, ctx.settings.output_extension),
            imports=result.imports,
            exports=result.exports,
        )

        await _enqueue(input, entry.imports, ImportNotFoundError, queue)
        await _enqueue(input, entry.exports, ExportNotFoundError, queue)

    logger.debug("graph_built", modules=len(graph), visited=len(checked))
    return graph


async def _enqueue(
    input: str,
    dependencies: Iterable[str],
    error: type[DependencyNotFoundError],
    queue: list[str],
) -> None:
    for dependency in dependencies:
        if not is_url(dependency) and not await path_exists(local_path(dependency)):
            raise error(input, dependency)
        queue.append(dependency)
