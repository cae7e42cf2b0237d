"""Loader / transformer / optimizer plugins"""

from bundlekit.plugins.base import (
    ExtensionTest,
    FunctionPlugin,
    Loader,
    Plugin,
    run_loaders,
    run_pipeline,
)
from bundlekit.plugins.loaders import EsmLoader, parse_export_clause, resolve_specifier
from bundlekit.plugins.transformers import CompactWhitespaceOptimizer, StripBomTransformer


def default_loaders() -> list[Loader]:
    return [EsmLoader()]


def default_transformers() -> list[Plugin]:
    return [StripBomTransformer()]


def default_optimizers() -> list[Plugin]:
    return [CompactWhitespaceOptimizer()]


__all__ = [
    "Plugin",
    "Loader",
    "ExtensionTest",
    "FunctionPlugin",
    "run_loaders",
    "run_pipeline",
    "EsmLoader",
    "parse_export_clause",
    "resolve_specifier",
    "StripBomTransformer",
    "CompactWhitespaceOptimizer",
    "default_loaders",
    "default_transformers",
    "default_optimizers",
]
