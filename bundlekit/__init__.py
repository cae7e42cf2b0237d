"""bundlekit - incremental module bundler.

Resolves entry modules into a dependency graph (static imports, dynamic
imports, re-exports) and assembles one runtime-loadable bundle per entry,
reusing transformed module sources while they are still fresh.

Quick Start:
    >>> import asyncio
    >>> from bundlekit import bundle, write_outputs, EsmLoader
    >>>
    >>> result = asyncio.run(bundle({"src/main.js": source}, loaders=[EsmLoader()]))
    >>> write_outputs(result)  # bundles under dist/deps, cache under dist/.cache
"""

__version__ = "0.1.0"  # Keep in sync with pyproject.toml

from bundlekit.bundler import BundleResult, assemble, bundle
from bundlekit.cache import CacheResult, CacheStatus, IncrementalCache
from bundlekit.config import BundleSettings, get_settings
from bundlekit.context import BuildContext
from bundlekit.errors import (
    BundleKitError,
    ConfigurationError,
    DependencyNotFoundError,
    ExportNotFoundError,
    ImportNotFoundError,
)
from bundlekit.graph import create_graph
from bundlekit.persist import load_state, save_state, write_outputs
from bundlekit.plugins import (
    CompactWhitespaceOptimizer,
    EsmLoader,
    FunctionPlugin,
    Loader,
    Plugin,
    StripBomTransformer,
)
from bundlekit.types import GraphEntry, ImportMap, ImportSpec, LoaderResult

__all__ = [
    "__version__",
    # Build
    "bundle",
    "assemble",
    "create_graph",
    "BundleResult",
    "BuildContext",
    # Cache
    "IncrementalCache",
    "CacheResult",
    "CacheStatus",
    # Config
    "BundleSettings",
    "get_settings",
    # Data model
    "GraphEntry",
    "ImportSpec",
    "ImportMap",
    "LoaderResult",
    # Plugins
    "Plugin",
    "Loader",
    "FunctionPlugin",
    "EsmLoader",
    "StripBomTransformer",
    "CompactWhitespaceOptimizer",
    # Persistence
    "write_outputs",
    "save_state",
    "load_state",
    # Errors
    "BundleKitError",
    "DependencyNotFoundError",
    "ImportNotFoundError",
    "ExportNotFoundError",
    "ConfigurationError",
]
