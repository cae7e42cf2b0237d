"""
Build data model

Graph entries are pydantic models so a graph can be persisted as JSON and
handed back to a later build.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter


class ImportSpec(BaseModel):
    """One import edge"""

    dynamic: bool = False


class LoaderResult(BaseModel):
    """What a loader declares about one module"""

    imports: dict[str, ImportSpec] = Field(default_factory=dict)
    """Imported module id → edge kind"""

    exports: dict[str, list[str]] = Field(default_factory=dict)
    """Re-exported module id → exported names"""


class GraphEntry(LoaderResult):
    """Resolved graph node"""

    path: str
    """Filesystem path of the source (remote ids map to their local copy)"""

    output: str
    """Bundle output path (hash of the id)"""

    def static_imports(self) -> list[str]:
        return [dep for dep, spec in self.imports.items() if not spec.dynamic]

    def dynamic_imports(self) -> list[str]:
        return [dep for dep, spec in self.imports.items() if spec.dynamic]

    def exported_names(self) -> list[str]:
        """Flattened re-exported names, first occurrence wins."""
        names: list[str] = []
        for values in self.exports.values():
            for name in values:
                if name not in names:
                    names.append(name)
        return names


class ImportMap(BaseModel):
    """Browser import map (``imports`` + ``scopes``)"""

    imports: dict[str, str] = Field(default_factory=dict)
    scopes: dict[str, dict[str, str]] = Field(default_factory=dict)

    def resolve(self, specifier: str, referrer: str | None = None) -> str | None:
        """
        Resolve a specifier through the map.

        Scopes whose prefix matches the referrer are consulted first (longest
        prefix first), then top-level imports. Within a table an exact key
        wins over the longest ``/``-terminated prefix key.

        Returns:
            Mapped address or None if the map has no rule for the specifier
        """
        if referrer is not None:
            for scope in sorted(self.scopes, key=len, reverse=True):
                if referrer.startswith(scope):
                    mapped = _resolve_in(self.scopes[scope], specifier)
                    if mapped is not None:
                        return mapped
        return _resolve_in(self.imports, specifier)


def _resolve_in(table: dict[str, str], specifier: str) -> str | None:
    if specifier in table:
        return table[specifier]
    best: str | None = None
    for key in table:
        if key.endswith("/") and specifier.startswith(key):
            if best is None or len(key) > len(best):
                best = key
    if best is None:
        return None
    return table[best] + specifier[len(best) :]


Graph = dict[str, GraphEntry]
InputMap = dict[str, str]
FileMap = dict[str, str]
CacheMap = dict[str, str]
OutputMap = dict[str, str]

GraphAdapter: TypeAdapter[Graph] = TypeAdapter(Graph)

__all__ = [
    "ImportSpec",
    "LoaderResult",
    "GraphEntry",
    "ImportMap",
    "Graph",
    "InputMap",
    "FileMap",
    "CacheMap",
    "OutputMap",
    "GraphAdapter",
]
