"""
ES module loader

Regex scan of ``import`` / ``export ... from`` statements. This is not a
parser: specifiers inside comments or strings are picked up too.
"""

from __future__ import annotations

import posixpath
import re
from typing import TYPE_CHECKING
from urllib.parse import urljoin

from bundlekit.paths import is_file_url, is_url
from bundlekit.plugins.base import ExtensionTest
from bundlekit.types import ImportMap, ImportSpec, LoaderResult

if TYPE_CHECKING:
    from bundlekit.context import BuildContext

DEFAULT_EXTENSIONS = (".js", ".mjs", ".jsx", ".ts", ".tsx")

_STATIC_IMPORT = re.compile(r"""(?<![\w$.])import\s+(?:[\w$*\s{},]+?\s*from\s*)?(["'])([^"'\n]+)\1""")
_DYNAMIC_IMPORT = re.compile(r"""(?<![\w$.])import\s*\(\s*(["'])([^"'\n]+)\1\s*\)""")
_EXPORT_FROM = re.compile(
    r"""(?<![\w$.])export\s+(\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*(["'])([^"'\n]+)\2"""
)
_ALIAS = re.compile(r"^([\w$]+)\s+as\s+([\w$]+)$")


def parse_export_clause(clause: str) -> list[str]:
    """
    Exported names of an ``export`` clause.

    ``{ a, b as c }`` → ["a", "c"], ``* as ns`` → ["ns"], ``*`` → ["*"]
    """
    clause = clause.strip()
    if clause.startswith("*"):
        m = re.match(r"^\*\s+as\s+([\w$]+)$", clause)
        return [m.group(1)] if m else ["*"]

    names = []
    for part in clause.strip("{}").replace("\n", " ").split(","):
        part = part.strip()
        if not part:
            continue
        m = _ALIAS.match(part)
        names.append(m.group(2) if m else part)
    return names


def resolve_specifier(specifier: str, referrer: str, import_map: ImportMap | None = None) -> str:
    """
    Module id of ``specifier`` imported from ``referrer``.

    Relative specifiers resolve against the referrer (posix path or URL), URLs
    are kept, bare specifiers go through the import map and are returned
    unchanged when the map has no rule for them.
    """
    specifier = specifier.strip()
    if specifier.startswith(("./", "../", "/")):
        if is_url(referrer) or is_file_url(referrer):
            return urljoin(referrer, specifier)
        if specifier.startswith("/"):
            return posixpath.normpath(specifier)
        return posixpath.normpath(posixpath.join(posixpath.dirname(referrer), specifier))
    if is_url(specifier) or is_file_url(specifier):
        return specifier
    if import_map is not None:
        mapped = import_map.resolve(specifier, referrer)
        if mapped is not None:
            if mapped.startswith(("./", "../")):
                return posixpath.normpath(mapped)
            return mapped
    return specifier


class EsmLoader:
    """
    Loader for ES modules.

    Imports are recorded in source order. A module imported both statically
    and dynamically by the same file is recorded as static.
    """

    def __init__(self, extensions: tuple[str, ...] = DEFAULT_EXTENSIONS) -> None:
        self.test = ExtensionTest(extensions)

    def matches(self, input: str) -> bool:
        return self.test(input)

    def apply(self, input: str, source: str, ctx: BuildContext | None = None) -> LoaderResult:
        import_map = ctx.import_map if ctx is not None else None
        if source.startswith("\ufeff"):
            source = source[1:]

        found: list[tuple[int, str, bool]] = []
        for m in _STATIC_IMPORT.finditer(source):
            found.append((m.start(), m.group(2), False))
        for m in _DYNAMIC_IMPORT.finditer(source):
            found.append((m.start(), m.group(2), True))
        found.sort()

        imports: dict[str, ImportSpec] = {}
        for _, specifier, dynamic in found:
            dependency = resolve_specifier(specifier, input, import_map)
            if dependency in imports:
                if not dynamic:
                    imports[dependency].dynamic = False
                continue
            imports[dependency] = ImportSpec(dynamic=dynamic)

        exports: dict[str, list[str]] = {}
        for m in _EXPORT_FROM.finditer(source):
            dependency = resolve_specifier(m.group(3), input, import_map)
            names = exports.setdefault(dependency, [])
            for name in parse_export_clause(m.group(1)):
                if name not in names:
                    names.append(name)

        return LoaderResult(imports=imports, exports=exports)
