"""
Bundle Assembler

Turns each entry (and every dynamic-import target, as its own entry) into a
self-contained bundle: loader preamble, the texts of the entry's static
closure in traversal order, then the instantiate footer and export list.

A bundle is emitted only when some module of its closure was regenerated or
its output file is missing. Invalidation is whole-bundle.

Usage:
    >>> result = await bundle({"src/main.js": source}, loaders=[EsmLoader()])
    >>> write_outputs(result)
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from bundlekit.cache import IncrementalCache
from bundlekit.config import BundleSettings, get_settings
from bundlekit.context import BuildContext
from bundlekit.graph import create_graph
from bundlekit.logging import get_logger
from bundlekit.paths import get_output
from bundlekit.plugins.base import Loader, Plugin, run_pipeline
from bundlekit.remote import RemoteModuleCache
from bundlekit.source import path_exists
from bundlekit.system import create_instantiate_string, create_system_exports, create_system_loader
from bundlekit.types import CacheMap, FileMap, Graph, ImportMap, OutputMap

logger = get_logger(__name__)


@dataclass
class BundleResult:
    """What a build decided should be written"""

    output_map: OutputMap
    cache_map: CacheMap
    graph: Graph
    file_map: FileMap = field(default_factory=dict)
    regenerated: list[str] = field(default_factory=list)
    up_to_date: list[str] = field(default_factory=list)


async def bundle(
    input_map: Mapping[str, str] | None = None,
    *,
    settings: BundleSettings | None = None,
    graph: Graph | None = None,
    file_map: FileMap | None = None,
    import_map: ImportMap | None = None,
    loaders: Sequence[Loader] = (),
    transformers: Sequence[Plugin] = (),
    optimizers: Sequence[Plugin] = (),
    remote: RemoteModuleCache | None = None,
    reload: bool | None = None,
    optimize: bool | None = None,
    quiet: bool | None = None,
) -> BundleResult:
    """
    Build every entry of ``input_map``.

    Args:
        input_map: Entry ids → raw source. Also pre-seeds sources of other
            ids (overrides / virtual files).
        settings: Layout and behavior; keyword flags below override it
        graph: Graph from a previous run to resume from
        file_map: Output paths from a previous run
        import_map: Import map handed to loaders
        loaders: Ordered loaders (first match)
        transformers: Ordered per-module transformers (all matches)
        optimizers: Ordered per-bundle optimizers (all matches)
        remote: Remote module collaborator (default: httpx-backed cache)
        reload: Bypass graph reuse and the transform cache
        optimize: Run optimizers on emitted bundles
        quiet: Suppress progress logging

    Returns:
        BundleResult with the output map, cache map and graph. Nothing is
        written to disk.

    Raises:
        DependencyNotFoundError: A local import or re-export target is missing
    """
    settings = settings or get_settings()
    overrides = {
        key: value
        for key, value in (("reload", reload), ("optimize", optimize), ("quiet", quiet))
        if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    start = time.perf_counter()
    inputs = list(input_map or {})
    ctx = BuildContext(
        settings=settings,
        graph=dict(graph or {}),
        file_map=dict(file_map or {}),
        input_map=dict(input_map or {}),
        import_map=import_map or ImportMap(),
        remote=remote,
    )
    try:
        await create_graph(inputs, loaders, ctx)
        result = await assemble(inputs, ctx, transformers, optimizers)
    finally:
        if remote is None:
            await ctx.remote.close()

    logger.debug(
        "build_complete",
        bundles=len(result.output_map),
        up_to_date=len(result.up_to_date),
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return result


async def assemble(
    inputs: Sequence[str],
    ctx: BuildContext,
    transformers: Sequence[Plugin] = (),
    optimizers: Sequence[Plugin] = (),
) -> BundleResult:
    """
    Assemble one bundle per root.

    Roots are processed LIFO, seeded with ``inputs``; dynamic imports met
    while walking a closure are pushed as further roots.
    """
    graph = ctx.graph
    progress = ctx.progress
    cache = IncrementalCache(ctx, transformers)
    output_map: OutputMap = {}
    regenerated: list[str] = []
    up_to_date: list[str] = []

    roots = list(inputs)
    checked_roots: set[str] = set()

    while roots:
        root = roots.pop()
        if root in checked_roots:
            continue
        checked_roots.add(root)

        entry = graph.get(root)
        if entry is None:
            logger.debug("no_graph_entry", input=root)
            continue

        strings = [create_system_loader()]
        needs_update = False

        dependencies = [root]
        checked: set[str] = set()
        while dependencies:
            dependency = dependencies.pop()
            if dependency in checked:
                continue
            checked.add(dependency)

            dep_entry = graph.get(dependency)
            if dep_entry is None:
                continue

            roots.extend(dep_entry.dynamic_imports())
            dependencies.extend(dep_entry.static_imports())
            dependencies.extend(dep_entry.exports)

            cached = await cache.resolve(dependency, dep_entry)
            if cached.status.regenerated:
                needs_update = True
                regenerated.append(dependency)
            if dependency != root:
                progress.event(cached.status.value, input=dependency)
            strings.append(cached.text)

        output = get_output(root, ctx.file_map, ctx.settings.deps_path, ctx.settings.output_extension)
        if not await path_exists(output):
            needs_update = True

        if not needs_update:
            progress.event("up-to-date", input=root)
            up_to_date.append(root)
            continue

        strings.append(create_instantiate_string(output))
        strings.append(create_system_exports(entry.exported_names()))
        text = "\n".join(strings)

        if ctx.settings.optimize:
            text = await run_pipeline(optimizers, root, text, ctx)

        progress.event("bundle", input=root, output=output)
        output_map[output] = text

    return BundleResult(
        output_map=output_map,
        cache_map=ctx.cache_map,
        graph=graph,
        file_map=ctx.file_map,
        regenerated=regenerated,
        up_to_date=up_to_date,
    )
