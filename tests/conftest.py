"""
Global test configuration and fixtures
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from bundlekit.config import BundleSettings
from bundlekit.context import BuildContext
from bundlekit.types import LoaderResult


class StaticLoader:
    """Loader answering from a fixed id → {imports, exports} table."""

    def __init__(self, table: Mapping[str, Mapping[str, Any]]) -> None:
        self.table = table
        self.calls: list[str] = []

    def matches(self, input: str) -> bool:
        return input in self.table

    def apply(self, input: str, source: str, ctx: Any) -> Mapping[str, Any]:
        self.calls.append(input)
        return self.table[input]


class RecordingTransformer:
    """Transformer that tags each module's text and records what it saw."""

    def __init__(self, tag: str = "T") -> None:
        self.tag = tag
        self.calls: list[str] = []

    def matches(self, input: str) -> bool:
        return True

    def apply(self, input: str, text: str, ctx: Any) -> str:
        self.calls.append(input)
        return f"[{self.tag}]{text}"


def touch_later(path: str | Path, than: str | Path, seconds: float = 10.0) -> None:
    """Set the mtime of ``path`` strictly past the mtime of ``than``."""
    stamp = os.stat(than).st_mtime + seconds
    os.utime(path, (stamp, stamp))


@pytest.fixture
def project(tmp_path, monkeypatch) -> Path:
    """Empty project directory used as the working directory"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write(project):
    """Write module files relative to the project root"""

    def _write(files: Mapping[str, str]) -> None:
        for name, text in files.items():
            path = project / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")

    return _write


@pytest.fixture
def settings(project) -> BundleSettings:
    return BundleSettings(out_dir="dist", quiet=True)


@pytest.fixture
def ctx(settings) -> BuildContext:
    return BuildContext(settings=settings)


@pytest.fixture
def loader_result():
    def _make(imports=None, exports=None) -> LoaderResult:
        return LoaderResult.model_validate({"imports": imports or {}, "exports": exports or {}})

    return _make


@pytest.fixture
def static_loader():
    return StaticLoader


@pytest.fixture
def recording_transformer():
    return RecordingTransformer


@pytest.fixture
def bump_mtime():
    return touch_later


# Pytest hooks
def pytest_collection_modifyitems(config, items):
    """Add markers from the test path"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
