"""
bundlekit CLI

Usage:
    bundlekit bundle src/main.js --out-dir dist
    bundlekit bundle src/main.js --reload --optimize
    bundlekit graph src/main.js
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from bundlekit.bundler import bundle as run_bundle
from bundlekit.config import BundleSettings
from bundlekit.context import BuildContext
from bundlekit.errors import BundleKitError, ConfigurationError
from bundlekit.graph import create_graph
from bundlekit.logging import setup_logging
from bundlekit.persist import load_state, save_state, write_outputs
from bundlekit.plugins import default_loaders, default_optimizers, default_transformers
from bundlekit.types import GraphAdapter, ImportMap

app = typer.Typer(help="Incremental module bundler")

STATE_FILE = "graph.json"


def _read_inputs(entries: list[str]) -> dict[str, str]:
    inputs = {}
    for entry in entries:
        path = Path(entry)
        if not path.is_file():
            raise ConfigurationError(f"entry not found: '{entry}'", entry=entry)
        inputs[entry] = path.read_text(encoding="utf-8")
    return inputs


def _read_import_map(path: Path | None) -> ImportMap:
    if path is None:
        return ImportMap()
    try:
        return ImportMap.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise ConfigurationError(f"invalid import map: {path}", path=str(path)) from e


@app.command()
def bundle(
    entries: list[str] = typer.Argument(..., help="Entry modules"),
    out_dir: str = typer.Option("dist", "--out-dir", "-o", help="Output directory"),
    deps_dir: str = typer.Option("deps", help="Bundle subdirectory of out-dir"),
    cache_dir: str = typer.Option(".cache", help="Cache subdirectory of out-dir"),
    import_map: Optional[Path] = typer.Option(None, "--import-map", help="Import map JSON file"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Ignore cache and previous graph"),
    optimize: bool = typer.Option(False, "--optimize", help="Run optimizers"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No progress output"),
    state: Optional[Path] = typer.Option(
        None, "--state", help="Graph state file (default: <out-dir>/<cache-dir>/graph.json)"
    ),
):
    """Bundle entries and write changed outputs."""
    settings = BundleSettings(
        out_dir=out_dir,
        deps_dir=deps_dir,
        cache_dir=cache_dir,
        reload=reload,
        optimize=optimize,
        quiet=quiet,
    )
    setup_logging(settings.log_level, settings.log_format)
    state_path = state or Path(settings.cache_path) / STATE_FILE

    try:
        graph, file_map = load_state(state_path)
        result = asyncio.run(
            run_bundle(
                _read_inputs(entries),
                settings=settings,
                graph=graph,
                file_map=file_map,
                import_map=_read_import_map(import_map),
                loaders=default_loaders(),
                transformers=default_transformers(),
                optimizers=default_optimizers(),
            )
        )
    except BundleKitError as e:
        typer.echo(f"error: {e.message}", err=True)
        raise typer.Exit(code=1)

    write_outputs(result)
    save_state(state_path, result.graph, result.file_map)

    if not quiet:
        typer.echo(f"{len(result.output_map)} bundle(s) written, {len(result.up_to_date)} up-to-date")


@app.command()
def graph(
    entries: list[str] = typer.Argument(..., help="Entry modules"),
    import_map: Optional[Path] = typer.Option(None, "--import-map", help="Import map JSON file"),
):
    """Print the resolved module graph as JSON."""
    settings = BundleSettings(quiet=True)
    setup_logging(settings.log_level, settings.log_format)

    async def _resolve():
        ctx = BuildContext(
            settings=settings,
            input_map=_read_inputs(entries),
            import_map=_read_import_map(import_map),
        )
        try:
            return await create_graph(list(ctx.input_map), default_loaders(), ctx)
        finally:
            await ctx.remote.close()

    try:
        resolved = asyncio.run(_resolve())
    except BundleKitError as e:
        typer.echo(f"error: {e.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(GraphAdapter.dump_python(resolved, mode="json"), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
