"""Built-in transformers and optimizers"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bundlekit.plugins.base import ExtensionTest
from bundlekit.plugins.loaders import DEFAULT_EXTENSIONS

if TYPE_CHECKING:
    from bundlekit.context import BuildContext

_BLANK_RUN = re.compile(r"\n{3,}")


class StripBomTransformer:
    """Drop a leading UTF-8 byte order mark from module source."""

    def __init__(self, extensions: tuple[str, ...] = DEFAULT_EXTENSIONS) -> None:
        self.test = ExtensionTest(extensions)

    def matches(self, input: str) -> bool:
        return self.test(input)

    def apply(self, input: str, text: str, ctx: BuildContext | None = None) -> str:
        if text.startswith("\ufeff"):
            return text[1:]
        return text


class CompactWhitespaceOptimizer:
    """
    Trailing-whitespace and blank-line compaction for finished bundles.

    Line structure is kept, so the bundle stays readable. Not a minifier.
    """

    def __init__(self, extensions: tuple[str, ...] = DEFAULT_EXTENSIONS) -> None:
        self.test = ExtensionTest(extensions)

    def matches(self, input: str) -> bool:
        return self.test(input)

    def apply(self, input: str, text: str, ctx: BuildContext | None = None) -> str:
        lines = [line.rstrip() for line in text.splitlines()]
        compacted = _BLANK_RUN.sub("\n\n", "\n".join(lines))
        if text.endswith("\n"):
            compacted += "\n"
        return compacted
