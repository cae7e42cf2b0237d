"""
Persistence of build results

The core only computes what should be written. These helpers are the caller
side: they write bundles and transform-cache files, and keep the graph and
file map between runs so the next build can resume from them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bundlekit.bundler import BundleResult
from bundlekit.errors import ConfigurationError
from bundlekit.logging import get_logger
from bundlekit.types import FileMap, Graph, GraphAdapter

logger = get_logger(__name__)

STATE_VERSION = "1.0"


def _write(path: str, text: str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")


def write_outputs(result: BundleResult) -> list[str]:
    """
    Write cache files, then bundles.

    Cache files go first so that a bundle on disk is never newer than the
    cache it was assembled from.

    Returns:
        Written paths, in write order
    """
    written = []
    for path, text in result.cache_map.items():
        _write(path, text)
        written.append(path)
    for path, text in result.output_map.items():
        _write(path, text)
        written.append(path)
    logger.debug("outputs_written", cache_files=len(result.cache_map), bundles=len(result.output_map))
    return written


def save_state(path: str | Path, graph: Graph, file_map: FileMap) -> None:
    """Persist graph and file map as JSON"""
    data: dict[str, Any] = {
        "version": STATE_VERSION,
        "graph": GraphAdapter.dump_python(graph, mode="json"),
        "file_map": file_map,
    }
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def load_state(path: str | Path) -> tuple[Graph, FileMap]:
    """
    Load graph and file map saved by ``save_state``.

    A missing file yields an empty state.

    Raises:
        ConfigurationError: The file exists but is not a valid state file
    """
    source = Path(path)
    if not source.exists():
        return {}, {}

    try:
        with open(source, encoding="utf-8") as f:
            data = json.load(f)
        graph = GraphAdapter.validate_python(data.get("graph", {}))
        file_map = {str(k): str(v) for k, v in data.get("file_map", {}).items()}
    except (json.JSONDecodeError, ValidationError, AttributeError) as e:
        raise ConfigurationError(f"invalid state file: {source}", path=str(source), original_error=e) from e

    return graph, file_map
