"""
Build context

All mutable state of one build, passed explicitly to the graph builder, the
cache, the assembler and every plugin.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bundlekit.config import BundleSettings
from bundlekit.logging import ProgressLogger, get_logger
from bundlekit.paths import is_url, local_path
from bundlekit.remote import RemoteModuleCache
from bundlekit.types import CacheMap, FileMap, Graph, ImportMap, InputMap


@dataclass
class BuildContext:
    """Shared state of a single build invocation"""

    settings: BundleSettings
    graph: Graph = field(default_factory=dict)
    file_map: FileMap = field(default_factory=dict)
    cache_map: CacheMap = field(default_factory=dict)
    input_map: InputMap = field(default_factory=dict)
    import_map: ImportMap = field(default_factory=ImportMap)
    remote: RemoteModuleCache | None = None
    progress: ProgressLogger | None = None

    def __post_init__(self) -> None:
        if self.remote is None:
            self.remote = RemoteModuleCache(
                self.settings.remote_path,
                timeout=self.settings.http_timeout,
                reload=self.settings.reload,
            )
        if self.progress is None:
            self.progress = ProgressLogger(get_logger("bundlekit.build"), quiet=self.settings.quiet)

    @property
    def reload(self) -> bool:
        return self.settings.reload

    @property
    def out_dir(self) -> str:
        return self.settings.out_dir

    @property
    def deps_dir(self) -> str:
        return self.settings.deps_dir

    def resolve_path(self, input: str) -> str:
        """Filesystem path of a module id"""
        if is_url(input):
            return self.remote.resolve(input)
        return local_path(input)
