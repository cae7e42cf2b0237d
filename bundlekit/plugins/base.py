"""
Plugin interfaces

Loaders, transformers and optimizers are ordered sequences of values with two
operations: ``matches(id)`` and ``apply(id, text, ctx)``.

- Loaders: first match wins, result declares imports/exports.
- Transformers: every match applies, in order, to one module's source.
- Optimizers: every match applies, in order, to a finished bundle.

``apply`` may be a plain function or a coroutine function.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from bundlekit.types import LoaderResult

if TYPE_CHECKING:
    from bundlekit.context import BuildContext


@runtime_checkable
class Plugin(Protocol):
    """Text-to-text transform (transformer or optimizer)"""

    def matches(self, input: str) -> bool: ...

    def apply(self, input: str, text: str, ctx: BuildContext) -> str | Awaitable[str]: ...


@runtime_checkable
class Loader(Protocol):
    """Source-to-edges scanner"""

    def matches(self, input: str) -> bool: ...

    def apply(
        self, input: str, source: str, ctx: BuildContext
    ) -> LoaderResult | Mapping[str, Any] | Awaitable[LoaderResult | Mapping[str, Any]]: ...


@dataclass(frozen=True)
class ExtensionTest:
    """Predicate matching module ids by suffix (query strings ignored)"""

    extensions: tuple[str, ...]

    def __call__(self, input: str) -> bool:
        path = input.split("?", 1)[0].split("#", 1)[0]
        return path.endswith(self.extensions)


@dataclass
class FunctionPlugin:
    """Plugin built from two callables"""

    test: Callable[[str], bool]
    fn: Callable[[str, str, Any], Any]

    def matches(self, input: str) -> bool:
        return self.test(input)

    def apply(self, input: str, text: str, ctx: BuildContext) -> Any:
        return self.fn(input, text, ctx)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def run_loaders(
    loaders: Sequence[Loader], input: str, source: str, ctx: BuildContext
) -> LoaderResult | None:
    """
    Apply the first loader that matches ``input``.

    Returns:
        Validated loader result, or None when no loader claims the module

    Raises:
        pydantic.ValidationError: Loader output is malformed
    """
    for loader in loaders:
        if loader.matches(input):
            result = await _resolve(loader.apply(input, source, ctx))
            return LoaderResult.model_validate(result)
    return None


async def run_pipeline(plugins: Iterable[Plugin], input: str, text: str, ctx: BuildContext) -> str:
    """Apply every matching plugin in order"""
    for plugin in plugins:
        if await _resolve(plugin.matches(input)):
            text = await _resolve(plugin.apply(input, text, ctx))
    return text
